"""
Form layout built with declarativeconf.

Labels and fonts are dataclasses, so they are values: every build produces a
fresh copy and shared builder prefixes never interfere. Buttons are plain
objects, so they are references: ``apply()`` configures them in place and their
tap handler is a per-instance callback slot.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from declarativeconf import Builder, Configurator, Handler

logger = logging.getLogger(__name__)


@dataclass
class Font:
    """Font settings for a label."""
    family: str = "System"
    size: float = 14.0
    bold: bool = False


@dataclass
class Label:
    """A text label."""
    text: str = ""
    color: str = "black"
    font: Font = field(default_factory=Font)
    caption: Optional[Font] = None


class Button:
    """A tappable button; owns its title and a tap handler."""

    title: Label
    enabled: bool

    on_tap = Handler()

    def __init__(self):
        self.title = Label()
        self.enabled = False

    def tap(self) -> None:
        if self.enabled:
            self.on_tap.invoke(self.title.text)


def emphasis() -> Configurator[Label]:
    """Reusable styling, applied to labels built elsewhere."""
    return Configurator(base_type=Label).font.bold(True).color("navy")


def main():
    """Build a small form and return the pieces for inspection."""
    heading = Builder(Label()).font.size(20).font.bold(True)

    title = heading.text("Settings").build()
    warning = heading.text("Danger zone").color("red").build()

    # No caption font on a default Label: the write is dropped
    plain = Builder(Label()).text("v1.0").caption.size(10).build()
    captioned = Builder(Label(caption=Font())).text("v1.0").caption.size(10).build()

    numbered = Builder(Label(text="Item")).reinforce(
        lambda label, n: setattr(label, 'text', f"{label.text} {n}"), 3
    ).build()

    emphasized = emphasis().configured(Label(text="Note"))

    taps: List[str] = []
    save = Button()
    Builder(save).title.text("Save").title.font.size(16).enabled(True).on_tap(taps.append).apply()
    save.tap()

    logger.info(f"Built form with heading {title.text!r} and button {save.title.text!r}")

    return {
        'title': title,
        'warning': warning,
        'plain': plain,
        'captioned': captioned,
        'numbered': numbered,
        'emphasized': emphasized,
        'save': save,
        'taps': taps,
    }


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    for name, value in main().items():
        print(f"{name}: {value}")
