"""Tests for EntityStore as a host store and entity model adapter."""

import pytest

from kopy import (
    ConfigurationError,
    EntityModelAdapter,
    EntityStore,
    Field,
    ResolutionError,
    belongs_to,
    has_many,
)


class TestTypes:

    def test_duplicate_type(self, store):
        with pytest.raises(ConfigurationError):
            store.create_collection('Pirate')

    def test_unknown_type(self, store):
        assert store.get_collection('Kraken') is None
        with pytest.raises(ConfigurationError) as exc_info:
            store.collection('Kraken')

        assert exc_info.value.type_name == 'Kraken'

    def test_inverse_derived_from_foreign_key(self, store):
        assert store.relationship('Pirate', 'mateys').inverse == 'pirate'
        assert store.relationship('Pirate', 'parrot').inverse == 'pirate'
        assert store.relationship('Matey', 'pirate').inverse == 'mateys'
        assert store.relationship('Parrot', 'pirate').inverse == 'parrot'
        assert store.relationship('Treasure', 'matey').inverse == 'treasures'

    def test_inverse_derived_from_default_foreign_key(self, policies):
        store = EntityStore("sloop", policies=policies)
        store.create_collection("Pirate", relationships=[has_many('mateys', 'Matey')])
        store.create_collection("Matey", fields={'pirate_id': Field(str)},
                                relationships=[belongs_to('pirate', 'Pirate')])

        descriptor = store.relationship('Pirate', 'mateys')

        assert descriptor.foreign_key == 'pirate_id'
        assert descriptor.inverse == 'pirate'

    def test_core_does_not_import_cloning_at_module_level(self):
        import kopy.core.store as store_module

        assert 'GraphCloner' not in vars(store_module)

    def test_declared_inverse_kept(self, store):
        assert store.relationship('Ship', 'ports').inverse == 'ships'

    def test_no_inverse_without_counterpart(self, store):
        store.create_collection('Hook')
        store.add_relationship('Pirate', belongs_to('hook', 'Hook'))

        assert store.relationship('Pirate', 'hook').inverse is None

    def test_relationships_of_resolves_inverses(self, store):
        names = {d.name: d.inverse for d in store.relationships_of('Matey')}

        assert names == {'pirate': 'mateys', 'treasures': 'matey'}


class TestEntities:

    def test_add_entity_fills_defaults(self, store):
        jack = store.add_entity('Pirate', {'name': 'Jack'})

        assert jack.properties == {'name': 'Jack', 'nick_name': 'Scallywag', 'age': 0,
                                   'ship_id': None}
        assert jack.persisted
        assert jack in store
        assert store.get_entity(jack.id) is jack

    def test_add_entity_unknown_type(self, store):
        with pytest.raises(ConfigurationError):
            store.add_entity('Kraken')

    def test_remove_entity(self, store):
        jack = store.add_entity('Pirate', {'name': 'Jack'})

        assert store.remove_entity(jack.id)
        assert not store.remove_entity(jack.id)
        assert jack not in store
        assert not jack.persisted
        assert store.collection('Pirate').count() == 0


class TestRelate:

    def test_has_many_sets_back_reference_and_key(self, store):
        jack = store.add_entity('Pirate', {'name': 'Jack'})
        gibbs = store.add_entity('Matey', {'name': 'Gibbs'})

        store.relate(jack, 'mateys', gibbs)

        assert jack.mateys == [gibbs]
        assert gibbs.pirate is jack
        assert gibbs.pirate_id == jack.id

    def test_belongs_to_appends_to_inverse_collection(self, store):
        jack = store.add_entity('Pirate', {'name': 'Jack'})
        gibbs = store.add_entity('Matey', {'name': 'Gibbs'})

        store.relate(gibbs, 'pirate', jack)
        store.relate(gibbs, 'pirate', jack)

        assert jack.mateys == [gibbs]
        assert gibbs.pirate_id == jack.id

    def test_many_to_many(self, store):
        pearl = store.add_entity('Ship', {'name': 'Black Pearl'})
        tortuga = store.add_entity('Port', {'name': 'Tortuga'})

        store.relate(pearl, 'ports', tortuga)

        assert pearl.ports == [tortuga]
        assert tortuga.ships == [pearl]

    def test_wrong_target_type(self, store):
        jack = store.add_entity('Pirate', {'name': 'Jack'})
        polly = store.add_entity('Parrot', {'name': 'Polly'})

        with pytest.raises(ConfigurationError):
            store.relate(jack, 'mateys', polly)

    def test_unknown_relationship(self, store):
        jack = store.add_entity('Pirate', {'name': 'Jack'})
        polly = store.add_entity('Parrot', {'name': 'Polly'})

        with pytest.raises(ResolutionError):
            store.relate(jack, 'pets', polly)


class TestAdapter:

    def test_implements_protocol(self, store):
        assert isinstance(store, EntityModelAdapter)

    def test_reads_and_writes(self, store, jack):
        assert store.type_of(jack) == 'Pirate'
        assert store.identity_of(jack) == jack.id
        assert store.read_field(jack, 'name') == 'Jack'
        assert store.default_field_value('Pirate', 'nick_name') == 'Scallywag'
        assert [m.name for m in store.read_relationship(jack, 'mateys')] == ['Gibbs', 'Cotton']
        assert store.read_relationship(jack, 'parrot').name == 'Polly'

        store.write_field(jack, 'age', 41)
        assert jack.age == 41

    def test_read_to_many_returns_a_copy(self, store, jack):
        members = store.read_relationship(jack, 'mateys')
        members.clear()

        assert len(jack.mateys) == 2

    def test_unloaded_relationships(self, store):
        barbossa = store.add_entity('Pirate', {'name': 'Barbossa'})

        assert store.read_relationship(barbossa, 'mateys') == []
        assert store.read_relationship(barbossa, 'parrot') is None

    def test_write_relationship(self, store, jack):
        polly = jack.parrot
        kopy = store.shallow_clone(jack)

        store.write_relationship(kopy, 'parrot', polly)
        store.write_relationship(kopy, 'mateys', None)

        assert kopy.parrot is polly
        assert kopy.mateys == []

    def test_shallow_clone(self, store, jack):
        kopy = store.shallow_clone(jack)

        assert kopy.type == jack.type
        assert kopy.id != jack.id
        assert kopy.properties == jack.properties
        assert kopy.properties is not jack.properties
        assert kopy.relations == {}
        assert kopy.new_record
        assert store.get_stats()['clones_created'] == 1


class TestSave:

    def test_save_rederives_keys_from_relations(self, store):
        kopy = store.shallow_clone(store.add_entity('Pirate', {'name': 'Jack'}))
        gibbs = store.shallow_clone(store.add_entity('Matey', {'name': 'Gibbs'}))
        kopy.set_relation('mateys', [gibbs])
        gibbs.set_relation('pirate', kopy)

        store.save(kopy)

        assert kopy.persisted and gibbs.persisted
        assert gibbs.pirate_id == kopy.id
        assert store.get_entity(gibbs.id) is gibbs

    def test_save_handles_cycles(self, store, jack):
        store.save(jack)

        assert jack.persisted
        assert jack.mateys[0].pirate_id == jack.id

    def test_save_clears_key_of_empty_belongs_to(self, store):
        gibbs = store.add_entity('Matey', {'name': 'Gibbs', 'pirate_id': 'gone'})
        gibbs.set_relation('pirate', None)

        store.save(gibbs)

        assert gibbs.pirate_id is None


def test_repr_and_stats():
    store = EntityStore('empty')
    store.create_collection('Pirate', fields={'name': Field(str)})
    store.add_entity('Pirate', {'name': 'Jack'})

    assert repr(store) == "EntityStore(id=empty, entities=1, collections=1)"
    assert store.get_stats() == {'total_entities': 1, 'total_collections': 1,
                                 'clones_created': 0}
