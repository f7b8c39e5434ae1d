"""Shared fixtures: a small pirate ship domain."""

import pytest

from kopy import EntityStore, Field, GraphCloner, belongs_to, has_many, has_one
from kopy.cloning import RelationshipPolicyRegistry
from kopy.core.relationship import has_and_belongs_to_many


@pytest.fixture
def policies():
    """An empty, test-local policy registry."""
    return RelationshipPolicyRegistry()


@pytest.fixture
def store(policies):
    """A store with the pirate domain declared and no entities."""
    store = EntityStore("pirates", policies=policies)

    store.create_collection("Ship", fields={
        'name': Field(str),
    }, relationships=[
        has_many('crew', 'Pirate', foreign_key='ship_id'),
        has_and_belongs_to_many('ports', 'Port', inverse='ships'),
    ])
    store.create_collection("Port", fields={
        'name': Field(str),
    }, relationships=[
        has_and_belongs_to_many('ships', 'Ship', inverse='ports'),
    ])
    store.create_collection("Pirate", fields={
        'name': Field(str),
        'nick_name': Field(str, default='Scallywag'),
        'age': Field(int, default=0),
        'ship_id': Field(str),
    }, relationships=[
        has_many('mateys', 'Matey', foreign_key='pirate_id'),
        has_many('treasures', 'Treasure', foreign_key='pirate_id'),
        has_one('parrot', 'Parrot', foreign_key='pirate_id'),
        belongs_to('ship', 'Ship'),
    ])
    store.create_collection("Matey", fields={
        'name': Field(str),
        'pirate_id': Field(str),
    }, relationships=[
        belongs_to('pirate', 'Pirate'),
        has_many('treasures', 'Treasure', foreign_key='matey_id'),
    ])
    store.create_collection("Parrot", fields={
        'name': Field(str),
        'age': Field(int, default=1),
        'pirate_id': Field(str),
    }, relationships=[
        belongs_to('pirate', 'Pirate'),
    ])
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
    }, relationships=[
        belongs_to('treasure', 'Treasure'),
    ])
    store.create_collection("Bottle", fields={
        'label': Field(str),
    }, relationships=[
        has_many('drinkers', 'Drinker', foreign_key='bottle_id'),
    ])
    store.create_collection("Drinker", fields={
        'name': Field(str),
        'bottle_id': Field(str),
    }, relationships=[
        belongs_to('bottle', 'Bottle'),
    ])
    return store


@pytest.fixture
def cloner(store, policies):
    return GraphCloner(store, policies=policies)


@pytest.fixture
def jack(store):
    """
    Jack with two mateys, two treasures (found by Gibbs), a parrot and a ship.

        Jack -mateys-> [Gibbs, Cotton]
        Jack -treasures-> [Chest (2 gold pieces), Urn]
        Chest -matey-> Gibbs, Urn -matey-> Gibbs
        Jack -parrot-> Polly
        Jack -ship-> Black Pearl
    """
    jack = store.add_entity('Pirate', {'name': 'Jack', 'nick_name': 'Captain', 'age': 40})
    gibbs = store.add_entity('Matey', {'name': 'Gibbs'})
    cotton = store.add_entity('Matey', {'name': 'Cotton'})
    store.relate(jack, 'mateys', gibbs)
    store.relate(jack, 'mateys', cotton)

    chest = store.add_entity('Treasure', {'found_at': 'Isla de Muerta'})
    urn = store.add_entity('Treasure', {'found_at': 'Tortuga'})
    for treasure in (chest, urn):
        store.relate(jack, 'treasures', treasure)
        store.relate(treasure, 'matey', gibbs)

    for weight in (3, 5):
        store.relate(chest, 'gold_pieces', store.add_entity('GoldPiece', {'weight': weight}))

    store.relate(jack, 'parrot', store.add_entity('Parrot', {'name': 'Polly', 'age': 12}))
    store.relate(jack, 'ship', store.add_entity('Ship', {'name': 'Black Pearl'}))
    return jack


@pytest.fixture
def bottle(store):
    bottle = store.add_entity('Bottle', {'label': 'Rum'})
    for name in ('Jack', 'Gibbs'):
        store.relate(bottle, 'drinkers', store.add_entity('Drinker', {'name': name}))
    return bottle
