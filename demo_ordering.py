"""
Demo: order and page the example animals from a YAML query spec.
"""

from dataclasses import replace

from querykit.directives import apply_query_spec
from querykit.examples import Animal, build_example_animals
from querykit.logger import setup_logger
from querykit.pagination import PageRequest
from querykit.serialization import query_spec_from_yaml, query_spec_to_json

SPEC_YAML = """
sort: species,-id
page:
  page: 1
  size: 3
"""


def print_page(title, animals):
    print()
    print("=" * 50)
    print(title)
    print("=" * 50)
    for animal in animals:
        print(f"  {animal.id:>3}  {animal.species:<6} {animal.name}")
    print()


if __name__ == "__main__":
    setup_logger(level="DEBUG")

    animals = build_example_animals()
    spec = query_spec_from_yaml(SPEC_YAML)
    print_page("PAGE 1 (species asc, id desc)", apply_query_spec(animals, spec, Animal))

    next_spec = replace(spec, page=PageRequest(page=2, size=3))
    print_page("PAGE 2", apply_query_spec(animals, next_spec, Animal))

    print(f"Spec as JSON: {query_spec_to_json(next_spec)}")
