from typing import Iterable, List, Optional, Union

DISPLAY_SEPARATOR = ", "


def split_csv(value: Optional[Union[str, Iterable[str]]]) -> List[str]:
    """
    Turn a comma separated input into a list of trimmed pieces.

    Pieces are kept in input order, duplicates included. An empty or
    missing value gives an empty list. Lists are passed through with
    each element trimmed.
    """
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        return [piece.strip() for piece in value.split(",")]
    return [str(piece).strip() for piece in value]


def join_csv(values: Optional[Iterable[str]]) -> str:
    if not values:
        return ""
    return DISPLAY_SEPARATOR.join(values)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()
