from bs4 import BeautifulSoup


def clean_text(fragment: str) -> str:
    """
    Strip markup from an HTML fragment, decode its entities and collapse whitespace.
    """
    if not fragment:
        return ""
    text = BeautifulSoup(fragment, "html.parser").get_text(" ")
    return " ".join(text.split())
