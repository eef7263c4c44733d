"""
Sample records for demos and tests.

Animals carry a dataclass field set, a computed property and a method, so
they exercise every branch of property-name resolution.
"""
from dataclasses import dataclass
from typing import List


@dataclass
class Animal:
    id: int
    name: str
    species: str = "cat"
    legs: int = 4

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.species})"

    def speak(self) -> str:
        return "..."


def build_example_animals() -> List[Animal]:
    return [
        Animal(id=0, name="Sir Cat-a-lot", species="cat"),
        Animal(id=1, name="Bark-a-lot", species="dog"),
        Animal(id=2, name="Tweet-a-lot", species="bird", legs=2),
        Animal(id=3, name="Purr-a-lot", species="cat"),
        Animal(id=4, name="Woof-a-lot", species="dog"),
    ]
