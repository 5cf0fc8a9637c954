"""Hidden commands that are not listed by ``help``."""

from __future__ import annotations

import random

from ..core.types import CommandResult
from ..fs import FileSystem
from .base import Command, ok

QUILL = r"""
        ,
       /|
      / |
     /  |
    /   |
   /    |
  /  ~  |
 /______|
    ||
    ||
    \/
"""

VERSES = (
    """From Sonnet 18

Shall I compare thee to a summer's day?
Thou art more lovely and more temperate:
Rough winds do shake the darling buds of May,
And summer's lease hath all too short a date.""",
    """From Sonnet 116

Let me not to the marriage of true minds
Admit impediments. Love is not love
Which alters when it alteration finds,
Or bends with the remover to remove.""",
    """From The Phoenix and the Turtle

So they loved, as love in twain
Had the essence but in one;
Two distincts, division none:
Number there in love was slain.""",
    """From Romeo and Juliet, Act III, Scene 5

Juliet. Yon light is not day-light, I know it, I:
It is some meteor that the sun exhales,
To be to thee this night a torch-bearer,
And light thee on thy way to Mantua.""",
)


class ShakespeareCommand(Command):
    name = "shakespeare"
    description = "Display a quote from the Bard himself"
    usage = "shakespeare"
    is_easter_egg = True

    def __init__(self, fs: FileSystem, rng: random.Random | None = None) -> None:
        super().__init__(fs)
        self.rng = rng or random.Random()

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        return ok(f"{QUILL}\n{self.rng.choice(VERSES)}\n\n")
