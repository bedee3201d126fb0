"""Decorative intro sentences for recommendations."""
import random
from typing import Optional

from nexus_crusher.models.champion import Champion, Role

INTRO_TEMPLATES = (
    "{name} excels in the {lane} role",
    "{name} is a strong pick for {lane}",
    "{name} is currently performing well in {lane}",
    "Consider {name} for your {lane} game",
    "{name} is a solid choice for {lane}",
)


class IntroPicker:
    """Chooses an intro line per recommendation.

    Pass a seeded ``random.Random`` for reproducible output.
    """

    def __init__(self, rng: Optional[random.Random] = None, templates: tuple[str, ...] = INTRO_TEMPLATES):
        self.rng = rng or random.Random()
        self.templates = templates

    def pick(self, champion: Champion, role: Role) -> str:
        template = self.rng.choice(self.templates)
        return template.format(name=champion.name, lane=role.label)
