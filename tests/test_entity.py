"""Tests for Entity."""

import pytest

from kopy import Entity


class TestEntity:

    def test_generated_id(self):
        a, b = Entity(entity_type='Pirate'), Entity(entity_type='Pirate')

        assert a.id and b.id
        assert a.id != b.id
        assert a != b

    def test_defaults(self):
        entity = Entity()

        assert entity.type == 'Unknown'
        assert entity.properties == {}
        assert entity.relations == {}
        assert entity.new_record

    def test_properties(self):
        entity = Entity(entity_type='Pirate', properties={'name': 'Jack'})
        entity.set_property('age', 40)

        assert entity.get_property('name') == 'Jack'
        assert entity.get_property('beard', 'none') == 'none'
        assert entity.has_property('age')
        assert not entity.has_property('beard')

    def test_relations(self):
        jack = Entity('jack', 'Pirate')
        polly = Entity('polly', 'Parrot')

        jack.set_relation('parrot', polly)

        assert jack.has_relation('parrot')
        assert jack.get_relation('parrot') is polly
        assert jack.get_relation('mateys', []) == []

    def test_attribute_access(self):
        jack = Entity('jack', 'Pirate', {'name': 'Jack'})
        jack.set_relation('mateys', [])

        assert jack.name == 'Jack'
        assert jack.mateys == []
        with pytest.raises(AttributeError):
            jack.beard

    def test_equality_by_id(self):
        assert Entity('jack', 'Pirate') == Entity('jack', 'Pirate')
        assert len({Entity('jack', 'Pirate'), Entity('jack', 'Pirate')}) == 1
        assert Entity('jack', 'Pirate') != 'jack'

    def test_to_dict_serializes_relations_by_id(self):
        jack = Entity('jack', 'Pirate', {'name': 'Jack'})
        jack.set_relation('parrot', Entity('polly', 'Parrot'))
        jack.set_relation('mateys', [Entity('gibbs', 'Matey')])
        jack.set_relation('ship', None)

        data = jack.to_dict()

        assert data['relations'] == {'parrot': 'polly', 'mateys': ['gibbs'], 'ship': None}
        assert data['properties'] == {'name': 'Jack'}
        assert data['persisted'] is False

    def test_repr(self):
        assert repr(Entity('jack-sparrow', 'Pirate', {'name': 'Jack'})) == \
            "Entity(id=jack-spa, type=Pirate, name=Jack)"
