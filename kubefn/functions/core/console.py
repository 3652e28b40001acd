import sys


# ANSI Escape Codes for Colors
class Color:
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    UNDERLINE = "\033[4m"
    END = "\033[0m"


def paint(msg: str, *styles: str, enabled: bool = True) -> str:
    if not enabled or not styles:
        return msg
    return f"{''.join(styles)}{msg}{Color.END}"


def success(msg: str, color: bool = True):
    print(paint(f"✅ {msg}", Color.GREEN, enabled=color))


def warning(msg: str, color: bool = True):
    print(paint(f"⚠️ {msg}", Color.YELLOW, enabled=color), file=sys.stderr)


def error(msg: str, color: bool = True):
    print(paint(f"❌ {msg}", Color.RED, enabled=color), file=sys.stderr)
