# tests/test_repositories.py

"""
Repository Tests - snapshot reads, atomic mutation, JSON persistence
"""

import pytest

from app.core.exceptions import DuplicateEntityException, EntityNotFoundException, RepositoryException
from app.models.run import CompanyEntry, RunRecord
from app.models.scoring_config import Criterion, ScoringConfigCreate
from app.repositories.config_repository import ConfigRepository
from app.repositories.run_repository import RunRepository
from app.services.seed import DEFAULT_CONFIGS, seed_default_configs


def make_run(run_id="run-1", n=2) -> RunRecord:
    return RunRecord(
        id=run_id,
        name="Batch",
        config_id="config-default",
        config_name="Default Evaluation",
        scale="1-10",
        company_count=n,
        intake=[CompanyEntry(id=f"company-{i}", name=f"Co {i}") for i in range(n)],
    )


class TestSnapshots:

    def test_reads_are_copies(self, run_repo):
        run_repo.add(make_run())
        snapshot = run_repo.get_by_id("run-1")
        snapshot.companies_scored = 99
        snapshot.intake.clear()

        stored = run_repo.get_by_id("run-1")
        assert stored.companies_scored == 0
        assert len(stored.intake) == 2

    def test_duplicate_add(self, run_repo):
        run_repo.add(make_run())
        with pytest.raises(DuplicateEntityException):
            run_repo.add(make_run())

    def test_missing(self, run_repo):
        assert run_repo.get_by_id("run-x") is None
        with pytest.raises(EntityNotFoundException):
            run_repo.get_or_raise("run-x")
        with pytest.raises(EntityNotFoundException):
            run_repo.delete("run-x")


class TestMutate:

    def test_commit(self, run_repo):
        run_repo.add(make_run())

        def bump(run):
            run.companies_scored += 1

        updated = run_repo.mutate("run-1", bump)
        assert updated.companies_scored == 1
        assert run_repo.get_by_id("run-1").companies_scored == 1

    def test_rollback_on_error(self, run_repo):
        run_repo.add(make_run())

        def broken(run):
            run.companies_scored += 1
            raise ValueError("bad report")

        with pytest.raises(ValueError):
            run_repo.mutate("run-1", broken)
        assert run_repo.get_by_id("run-1").companies_scored == 0

    def test_unknown_id(self, run_repo):
        with pytest.raises(EntityNotFoundException):
            run_repo.mutate("run-x", lambda r: None)


class TestConfigRepository:

    def test_seeded_defaults(self, config_repo):
        assert [c.id for c in config_repo.get_all()] == [config_id for config_id, _ in DEFAULT_CONFIGS]
        assert config_repo.get_default().id == "config-default"

    def test_seed_only_into_empty_store(self, config_repo):
        assert seed_default_configs(config_repo) == 0
        assert config_repo.count() == len(DEFAULT_CONFIGS)

    def test_new_default_clears_previous(self, config_repo):
        created = config_repo.create(ScoringConfigCreate(
            name="New Default",
            is_default=True,
            criteria=[Criterion(id="a", name="A", weight=100)],
        ))
        assert config_repo.get_default().id == created.id
        assert sum(1 for c in config_repo.get_all() if c.is_default) == 1

    def test_update_keeps_identity(self, config_repo):
        before = config_repo.get_or_raise("config-saas")
        payload = ScoringConfigCreate(**before.model_dump(exclude={"id", "created_at"}))
        payload.name = "SaaS v2"
        after = config_repo.update("config-saas", payload)
        assert after.id == before.id
        assert after.created_at == before.created_at
        assert after.name == "SaaS v2"

    def test_update_missing(self, config_repo):
        with pytest.raises(EntityNotFoundException):
            config_repo.update("config-x", ScoringConfigCreate(name="X"))


class TestJsonPersistence:

    def test_round_trip_through_state_dir(self, tmp_path):
        runs = RunRepository(tmp_path)
        runs.add(make_run())
        runs.mutate("run-1", lambda r: r.failed_company_ids.append("company-0"))

        reloaded = RunRepository(tmp_path)
        assert reloaded.get_or_raise("run-1").failed_company_ids == ["company-0"]
        assert (tmp_path / "runs.json").exists()

    def test_configs_persist(self, tmp_path):
        seed_default_configs(ConfigRepository(tmp_path))
        assert ConfigRepository(tmp_path).count() == len(DEFAULT_CONFIGS)

    def test_corrupt_state_file(self, tmp_path):
        (tmp_path / "runs.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(RepositoryException):
            RunRepository(tmp_path)
