"""
Deep Cloning Demo

Builds a small pirate crew, then clones it a few different ways: shallow,
with relationships, with field exceptions, with a clone dictionary, and with
type-level always-included relationships.
"""

import logging

from kopy import (
    CloneRegistry,
    EntityStore,
    Field,
    belongs_to,
    declare_always_included,
    has_many,
    has_one,
)
from kopy.core.logging_config import configure_logging


def build_store() -> EntityStore:
    store = EntityStore(store_id="black_pearl")

    store.create_collection("Pirate", fields={
        'name': Field(str),
        'nick_name': Field(str, default='Scallywag'),
    }, relationships=[
        has_many('mateys', 'Matey', foreign_key='pirate_id'),
        has_many('treasures', 'Treasure', foreign_key='pirate_id'),
        has_one('parrot', 'Parrot', foreign_key='pirate_id'),
    ])
    store.create_collection("Matey", fields={
        'name': Field(str),
        'pirate_id': Field(str),
    }, relationships=[belongs_to('pirate', 'Pirate')])
    store.create_collection("Parrot", fields={
        'name': Field(str),
        'pirate_id': Field(str),
    }, relationships=[belongs_to('pirate', 'Pirate')])
    store.create_collection("Treasure", fields={
        'found_at': Field(str),
        'pirate_id': Field(str),
        'matey_id': Field(str),
    }, relationships=[
        belongs_to('pirate', 'Pirate'),
        belongs_to('matey', 'Matey'),
        has_many('gold_pieces', 'GoldPiece', foreign_key='treasure_id'),
    ])
    store.create_collection("GoldPiece", fields={
        'weight': Field(int, default=1),
        'treasure_id': Field(str),
    }, relationships=[belongs_to('treasure', 'Treasure')])

    return store


def demo_deep_cloning():
    print("=" * 70)
    print("KOPY - DEEP CLONING DEMO")
    print("=" * 70)
    print()

    store = build_store()

    jack = store.add_entity('Pirate', {'name': 'Jack', 'nick_name': 'Captain'})
    gibbs = store.add_entity('Matey', {'name': 'Gibbs'})
    cotton = store.add_entity('Matey', {'name': 'Cotton'})
    store.relate(jack, 'mateys', gibbs)
    store.relate(jack, 'mateys', cotton)
    store.relate(jack, 'parrot', store.add_entity('Parrot', {'name': 'Polly'}))

    chest = store.add_entity('Treasure', {'found_at': 'Isla de Muerta'})
    store.relate(jack, 'treasures', chest)
    store.relate(chest, 'matey', gibbs)
    for weight in (3, 5):
        store.relate(chest, 'gold_pieces', store.add_entity('GoldPiece', {'weight': weight}))

    print(f"Original: {jack}")
    print(f"Stats: {store.get_stats()}")
    print()

    print("1. SHALLOW CLONE")
    print("-" * 70)
    kopy = store.clone(jack)
    print(f"Clone: {kopy}")
    print(f"Same fields, new identity: {kopy.properties == jack.properties}, {kopy.id != jack.id}")
    print()

    print("2. CLONING RELATIONSHIPS")
    print("-" * 70)
    kopy = store.clone(jack, include=['mateys', {'treasures': 'gold_pieces'}])
    print(f"Mateys: {[m.name for m in kopy.mateys]}")
    print(f"Matey back-reference is the clone: {all(m.pirate is kopy for m in kopy.mateys)}")
    print(f"Gold pieces: {[g.weight for g in kopy.treasures[0].gold_pieces]}")
    print()

    print("3. FIELD EXCEPTIONS")
    print("-" * 70)
    kopy = store.clone(jack, include='parrot', except_=['nick_name', {'parrot': ['name']}])
    print(f"Nick name reset to default: {kopy.nick_name}")
    print(f"Parrot name reset to default: {kopy.parrot.name}")
    print()

    print("4. CLONE DICTIONARY")
    print("-" * 70)
    registry = CloneRegistry()
    kopy = store.clone(
        jack,
        include=['mateys', {'treasures': 'matey'}],
        dictionary=registry,
    )
    print(f"Treasure matey is the cloned matey: {kopy.treasures[0].matey is kopy.mateys[0]}")
    print(f"Registry: {registry}")
    print()

    print("5. ALWAYS-INCLUDED RELATIONSHIPS")
    print("-" * 70)
    declare_always_included('Treasure', 'gold_pieces')
    kopy = store.clone(jack, include='treasures')
    print(f"Gold pieces cloned without asking: {len(kopy.treasures[0].gold_pieces)}")
    print()

    print("6. SAVING THE CLONE")
    print("-" * 70)
    store.save(kopy)
    treasure = kopy.treasures[0]
    print(f"Treasure now points at the clone: {treasure.pirate_id == kopy.id}")
    print(f"Stats: {store.get_stats()}")
    print()

    print("=" * 70)
    print("DEMO COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    configure_logging(level=logging.INFO)
    demo_deep_cloning()
