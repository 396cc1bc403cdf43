from rich.theme import Theme
from rich.style import Style
from rich.text import Text

from exercises.grading import OptionMark

FLAG_BLACK = "#2C3E50"
FLAG_RED = "#E74C3C"
FLAG_GOLD = "#F1C40F"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=FLAG_RED, bold=True),
        "secondary": Style(color=FLAG_GOLD, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "german": Style(color=FLAG_GOLD, bold=True),
        "option_label": Style(color=FLAG_GOLD, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "blank": Style(color=INFO_BLUE, bold=True),
        "title": Style(color=FLAG_RED, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)


def get_mark_style(mark: OptionMark) -> Style:
    """Get style for an option's selection/correctness mark."""
    styles = {
        OptionMark.SELECTED: Style(color=INFO_BLUE, bold=True, reverse=True),
        OptionMark.CORRECT: Style(color=SUCCESS_GREEN, bold=True),
        OptionMark.INCORRECT: Style(color=ERROR_RED, bold=True, strike=True),
    }
    return styles.get(mark, Style(color=TEXT_WHITE))


def get_mark_symbol(mark: OptionMark) -> str:
    """Get the leading symbol for a marked option."""
    symbols = {
        OptionMark.SELECTED: "● ",
        OptionMark.CORRECT: "✓ ",
        OptionMark.INCORRECT: "✗ ",
    }
    return symbols.get(mark, "  ")


def create_welcome_banner() -> Text:
    """Create the welcome banner text."""
    banner = Text()
    banner.append("╔══════════════════════════════════════╗\n", Style(color=FLAG_BLACK))
    banner.append("║          D E U T S C H               ║\n", Style(color=FLAG_RED, bold=True))
    banner.append("║          Deutsch Lernen              ║\n", Style(color=FLAG_GOLD))
    banner.append("╚══════════════════════════════════════╝", Style(color=FLAG_BLACK))
    return banner


def create_score_header(score: int, total: int) -> Text:
    """Create the score line shown after checking."""
    header = Text()
    if total and score == total:
        header.append("🎉 ", Style(color=FLAG_GOLD))
        style = Style(color=SUCCESS_GREEN, bold=True)
    else:
        style = Style(color=FLAG_GOLD, bold=True)
    header.append(f"Your Score: {score} / {total}", style)
    return header
