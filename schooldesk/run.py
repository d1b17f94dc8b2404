import uvicorn

from schooldesk import create_app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("schooldesk.run:app", host="0.0.0.0", port=8000, reload=True)
