from teamboard.core.exceptions import StoreError
from teamboard.models import db as _db
from teamboard.models.card import Card
from teamboard.models.data_migration import DataMigrationRun
from teamboard.models.team import Label
from teamboard.services.migrations import LabelMigration, run_migration
from teamboard.services.migrations.labels import DEFAULT_LABELS


def _label_names(team_id):
    return [label.name for label in Label.query.filter_by(team_id=team_id).order_by(Label.id).all()]


def test_templates_are_the_eleven_default_labels_in_order():
    templates = LabelMigration().build_templates()

    assert len(templates) == 11
    assert [t.name for t in templates] == [name for name, _ in DEFAULT_LABELS]
    assert templates[0].name == "Frontend" and templates[0].color == "#8B5CF6"
    assert templates[-1].name == "Blocked" and templates[-1].color == "#991B1B"


def test_empty_team_gets_every_default_label(store, make_team):
    team = make_team("Platform")

    report = run_migration(LabelMigration(), store)

    assert report.status == "applied"
    assert report.created == 11
    assert report.reused == 0
    assert report.failed == 0
    assert _label_names(team.id) == [name for name, _ in DEFAULT_LABELS]
    colors = {label.name: label.color for label in Label.query.filter_by(team_id=team.id)}
    assert colors["Bug"] == "#EF4444"
    assert colors["Review"] == "#06B6D4"


def test_every_team_is_seeded(store, make_team):
    first = make_team("Alpha")
    second = make_team("Beta")

    report = run_migration(LabelMigration(), store)

    assert report.parents_processed == 2
    assert report.created == 22
    assert Label.query.filter_by(team_id=first.id).count() == 11
    assert Label.query.filter_by(team_id=second.id).count() == 11


def test_existing_label_is_reused_not_duplicated(store, make_team):
    team = make_team("Solo")
    feature = Label(team_id=team.id, name="Feature", color="#000000")
    _db.session.add(feature)
    _db.session.commit()
    feature_id = feature.id

    report = run_migration(LabelMigration(), store)

    assert report.created == 10
    assert report.reused == 1
    assert report.failed == 0
    assert report.results[0].skipped == ["Feature"]
    assert report.results[0].reused[0].id == feature_id

    features = Label.query.filter_by(team_id=team.id, name="Feature").all()
    assert len(features) == 1
    assert features[0].color == "#000000"
    assert Label.query.filter_by(team_id=team.id).count() == 11


def test_card_label_link_means_already_migrated(store, make_team):
    team = make_team("Linked")
    label = Label(team_id=team.id, name="Bug", color="#EF4444")
    card = Card(team_id=team.id, title="Fix login", slug="fix-login")
    card.labels.append(label)
    _db.session.add_all([label, card])
    _db.session.commit()

    report = run_migration(LabelMigration(), store)

    assert report.status == "already_migrated"
    assert report.created == 0
    assert report.parents_processed == 0
    assert Label.query.count() == 1
    assert DataMigrationRun.query.count() == 0


def test_second_run_is_a_noop(store, make_team):
    make_team("Repeat")

    first = run_migration(LabelMigration(), store)
    second = run_migration(LabelMigration(), store)

    assert first.created == 11
    assert second.status == "already_migrated"
    assert second.created == 0
    assert Label.query.count() == 11
    runs = DataMigrationRun.query.all()
    assert len(runs) == 1
    assert runs[0].name == "labels"
    assert runs[0].status == "applied"
    assert runs[0].created == 11


def test_without_ledger_rerun_reuses_every_label(store, make_team):
    make_team("No Ledger")

    run_migration(LabelMigration(), store, use_ledger=False)
    second = run_migration(LabelMigration(), store, use_ledger=False)

    assert second.status == "applied"
    assert second.created == 0
    assert second.reused == 11
    assert Label.query.count() == 11
    assert DataMigrationRun.query.count() == 0


def test_dry_run_writes_nothing(store, make_team):
    make_team("Preview")

    report = run_migration(LabelMigration(), store, dry_run=True)

    assert report.status == "dry_run"
    assert report.created == 11
    assert Label.query.count() == 0
    assert DataMigrationRun.query.count() == 0


def test_failed_child_does_not_stop_siblings_or_other_teams(store, make_team, monkeypatch):
    first = make_team("First")
    second = make_team("Second")
    first_id, second_id = first.id, second.id

    original_create = store.create

    def flaky_create(model, **fields):
        if model is Label and fields["team_id"] == first_id and fields["name"] == "Backend":
            raise StoreError("create", "Label", RuntimeError("connection reset"))
        return original_create(model, **fields)

    monkeypatch.setattr(store, "create", flaky_create)

    report = run_migration(LabelMigration(), store)

    assert report.created == 21
    assert report.failed == 1
    first_result = report.results[0]
    assert first_result.parent_id == first_id
    assert first_result.failed == [("Backend", "connection reset")]

    expected = [name for name, _ in DEFAULT_LABELS]
    assert _label_names(first_id) == [name for name in expected if name != "Backend"]
    assert _label_names(second_id) == expected

    run = DataMigrationRun.query.one()
    assert run.status == "failed"
    assert run.failed_count == 1


def test_unexpected_error_on_one_label_keeps_the_rest_of_that_team(store, make_team, monkeypatch):
    first = make_team("Alpha")
    second = make_team("Beta")
    first_id, second_id = first.id, second.id
    original_create = store.create

    def broken_create(model, **fields):
        if model is Label and fields["team_id"] == second_id and fields["name"] == "Bug":
            raise RuntimeError("boom")
        return original_create(model, **fields)

    monkeypatch.setattr(store, "create", broken_create)

    report = run_migration(LabelMigration(), store)

    assert report.failed == 1
    assert report.created == 21
    assert report.results[1].parent_id == second_id
    assert report.results[1].failed == [("Bug", "boom")]
    assert report.results[1].parent_skipped is False
    assert Label.query.filter_by(team_id=first_id).count() == 11
    assert _label_names(second_id) == [name for name, _ in DEFAULT_LABELS if name != "Bug"]


def test_failed_run_can_be_retried(store, make_team, monkeypatch):
    team = make_team("Retry")
    team_id = team.id
    original_create = store.create

    def flaky_create(model, **fields):
        if model is Label and fields["name"] == "Urgent":
            raise StoreError("create", "Label", RuntimeError("timeout"))
        return original_create(model, **fields)

    monkeypatch.setattr(store, "create", flaky_create)
    run_migration(LabelMigration(), store)
    monkeypatch.setattr(store, "create", original_create)

    retry = run_migration(LabelMigration(), store)

    assert retry.status == "applied"
    assert retry.created == 1
    assert retry.reused == 10
    assert Label.query.filter_by(team_id=team_id).count() == 11
    statuses = [run.status for run in DataMigrationRun.query.order_by(DataMigrationRun.id)]
    assert statuses == ["failed", "applied"]


def test_no_teams_is_an_empty_successful_run(store):
    report = run_migration(LabelMigration(), store)

    assert report.status == "applied"
    assert report.parents_processed == 0
    assert report.created == 0
