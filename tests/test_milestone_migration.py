from datetime import timedelta

from teamboard.core.exceptions import StoreError
from teamboard.models import db as _db
from teamboard.models.data_migration import DataMigrationRun
from teamboard.models.project import Milestone, Project
from teamboard.services.migrations import MilestoneMigration, run_migration


def _add_milestone(project, title="Kickoff", order=1):
    milestone = Milestone(project_id=project.id, title=title, order=order)
    _db.session.add(milestone)
    _db.session.commit()
    return milestone


def test_templates_use_reference_clock(frozen_now):
    templates = MilestoneMigration().build_templates(now=frozen_now)

    assert [t.title for t in templates] == [
        "Project Setup",
        "Core Features Development",
        "Testing & Quality Assurance",
        "Project Delivery",
    ]
    assert [t.offset_days for t in templates] == [7, 30, 45, 60]
    assert [t.target_date for t in templates] == [frozen_now + timedelta(days=d) for d in (7, 30, 45, 60)]
    assert {t.status for t in templates} == {"INCOMPLETE"}


def test_templates_only_differ_in_dates_between_clocks(frozen_now):
    migration = MilestoneMigration()
    earlier = migration.build_templates(now=frozen_now)
    later = migration.build_templates(now=frozen_now + timedelta(days=3))

    for a, b in zip(earlier, later):
        assert (a.title, a.description, a.notes, a.status) == (b.title, b.description, b.notes, b.status)
        assert b.target_date - a.target_date == timedelta(days=3)


def test_empty_project_gets_ordered_plan_and_populated_project_is_skipped(store, make_project, frozen_now):
    t1 = make_project("T1")
    t2 = make_project("T2")
    _add_milestone(t2, "Existing")
    t1_id, t2_id = t1.id, t2.id

    report = run_migration(MilestoneMigration(), store, now=frozen_now)

    assert report.created == 4
    assert report.skipped_parents == 1
    assert report.failed == 0

    created = Milestone.query.filter_by(project_id=t1_id).order_by(Milestone.order).all()
    assert [m.title for m in created] == [
        "Project Setup",
        "Core Features Development",
        "Testing & Quality Assurance",
        "Project Delivery",
    ]
    assert [m.order for m in created] == [1, 2, 3, 4]
    assert {m.status for m in created} == {"INCOMPLETE"}
    assert created[0].target_date.replace(tzinfo=None) == (frozen_now + timedelta(days=7)).replace(tzinfo=None)
    assert created[0].notes.startswith("Budget: $5,000")

    skipped = next(r for r in report.results if r.parent_id == t2_id)
    assert skipped.parent_skipped is True
    assert skipped.skip_reason == "already has 1 milestones"
    assert Milestone.query.filter_by(project_id=t2_id).count() == 1


def test_all_projects_with_milestones_is_already_migrated(store, make_project):
    project = make_project("Done")
    _add_milestone(project)

    report = run_migration(MilestoneMigration(), store)

    assert report.status == "already_migrated"
    assert Milestone.query.count() == 1
    assert DataMigrationRun.query.count() == 0


def test_no_projects_is_not_evidence(store):
    assert MilestoneMigration().has_already_migrated(store) is False

    report = run_migration(MilestoneMigration(), store)

    assert report.status == "applied"
    assert report.parents_processed == 0


def test_second_run_writes_nothing(store, make_project):
    make_project("Once")

    first = run_migration(MilestoneMigration(), store)
    second = run_migration(MilestoneMigration(), store)

    assert first.created == 4
    assert second.status == "already_migrated"
    assert Milestone.query.count() == 4
    assert DataMigrationRun.query.count() == 1


def test_failed_parent_does_not_stop_later_projects(store, make_project, monkeypatch):
    broken = make_project("Broken")
    healthy = make_project("Healthy")
    broken_id, healthy_id = broken.id, healthy.id

    original_count = store.count

    def flaky_count(model, *criteria, **filters):
        if model is Milestone and filters.get("project_id") == broken_id:
            raise StoreError("count", "Milestone", RuntimeError("lock timeout"))
        return original_count(model, *criteria, **filters)

    monkeypatch.setattr(store, "count", flaky_count)

    report = run_migration(MilestoneMigration(), store)

    assert report.parents_processed == 2
    assert report.created == 4
    assert report.failed == 1
    assert Milestone.query.filter_by(project_id=broken_id).count() == 0
    assert Milestone.query.filter_by(project_id=healthy_id).count() == 4


def test_failed_milestone_is_recorded_and_rest_are_created(store, make_project, monkeypatch):
    project = make_project("Partial")
    project_id = project.id
    original_create = store.create

    def flaky_create(model, **fields):
        if model is Milestone and fields["order"] == 2:
            raise StoreError("create", "Milestone", RuntimeError("value too long"))
        return original_create(model, **fields)

    monkeypatch.setattr(store, "create", flaky_create)

    report = run_migration(MilestoneMigration(), store)

    assert report.created == 3
    assert report.results[0].failed == [("Core Features Development", "value too long")]
    orders = [m.order for m in Milestone.query.filter_by(project_id=project_id).order_by(Milestone.order)]
    assert orders == [1, 3, 4]


def test_parent_label_uses_project_title(make_project):
    project = make_project("Mobile App")

    assert MilestoneMigration().parent_label(project) == "Mobile App"
    assert _db.session.get(Project, project.id).name == "Mobile App"


def test_unexpected_error_on_one_milestone_keeps_the_rest(store, make_project, monkeypatch):
    project = make_project("Unstable")
    project_id = project.id
    original_create = store.create

    def broken_create(model, **fields):
        if model is Milestone and fields["order"] == 3:
            raise KeyError("due_date")
        return original_create(model, **fields)

    monkeypatch.setattr(store, "create", broken_create)

    report = run_migration(MilestoneMigration(), store)

    assert report.created == 3
    assert report.failed == 1
    assert [key for key, _ in report.results[0].failed] == ["Testing & Quality Assurance"]
    orders = [m.order for m in Milestone.query.filter_by(project_id=project_id).order_by(Milestone.order)]
    assert orders == [1, 2, 4]
