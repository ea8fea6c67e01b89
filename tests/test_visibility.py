"""Tests for viewer contexts and report visibility."""

from reportadmin.reports import FieldSchema, Report, ReportRegistry
from reportadmin.reports.visibility import any_visible, is_visible, visible_descriptors
from reportadmin.viewer import ANONYMOUS, ViewerContext, anonymous_viewer, resolve_viewer

ALICE = ViewerContext.for_user("alice", ["ADMIN"])
BOB = ViewerContext.for_user("bob")


class AdminOnlyReport(Report):
    def can_view(self, viewer):
        return viewer.has_permission("ADMIN")

    def get_field_schema(self):
        return FieldSchema()


class AnonymousOnlyReport(Report):
    """Visible only when nobody is logged in."""

    def can_view(self, viewer):
        return viewer.is_anonymous

    def get_field_schema(self):
        return FieldSchema()


class RecordingReport(Report):
    seen: list = []

    def can_view(self, viewer):
        RecordingReport.seen.append(viewer)
        return False

    def get_field_schema(self):
        return FieldSchema()


def _descriptor(cls):
    return ReportRegistry([cls]).get(cls.type_id)


class TestViewerContext:
    """Tests for ViewerContext."""

    def test_anonymous(self):
        assert ANONYMOUS.is_anonymous
        assert ANONYMOUS.permissions == frozenset()

    def test_for_user(self):
        assert not ALICE.is_anonymous
        assert ALICE.permissions == frozenset({"ADMIN"})

    def test_has_permission_any_of(self):
        assert ALICE.has_permission("CMS_ACCESS_CMSMain", "ADMIN")
        assert not BOB.has_permission("ADMIN")

    def test_frozen(self):
        assert ViewerContext.for_user("x", ["A"]) == ViewerContext.for_user("x", ["A"])
        assert hash(ALICE) == hash(ViewerContext.for_user("alice", ["ADMIN"]))


class TestResolveViewer:
    """The ambient viewer replaces only a missing viewer."""

    def test_none_uses_ambient(self):
        assert resolve_viewer(None, lambda: ALICE) is ALICE

    def test_explicit_anonymous_kept(self):
        assert resolve_viewer(ANONYMOUS, lambda: ALICE) is ANONYMOUS

    def test_explicit_user_kept(self):
        assert resolve_viewer(BOB, lambda: ALICE) is BOB

    def test_default_ambient_is_anonymous(self):
        assert resolve_viewer(None) is ANONYMOUS
        assert anonymous_viewer() is ANONYMOUS


class TestIsVisible:
    """Tests for is_visible."""

    def test_descriptor_allowed(self):
        assert is_visible(_descriptor(AdminOnlyReport), ALICE)

    def test_descriptor_denied(self):
        assert not is_visible(_descriptor(AdminOnlyReport), BOB)

    def test_instance(self):
        assert is_visible(AdminOnlyReport(), ALICE)
        assert not is_visible(AdminOnlyReport(), ANONYMOUS)

    def test_missing_viewer_uses_ambient(self):
        d = _descriptor(AdminOnlyReport)
        assert is_visible(d, current_viewer=lambda: ALICE)
        assert not is_visible(d)

    def test_explicit_anonymous_not_replaced_by_ambient(self):
        d = _descriptor(AnonymousOnlyReport)
        assert is_visible(d, ANONYMOUS, current_viewer=lambda: ALICE)
        assert not is_visible(d, None, current_viewer=lambda: ALICE)

    def test_viewer_passed_through_unchanged(self):
        RecordingReport.seen = []
        is_visible(_descriptor(RecordingReport), BOB)
        assert RecordingReport.seen == [BOB]


class TestAnyVisible:
    """Tests for any_visible and visible_descriptors."""

    def test_empty(self):
        assert not any_visible([], ALICE)
        assert visible_descriptors([], ALICE) == []

    def test_one_visible(self):
        descriptors = ReportRegistry([AdminOnlyReport, AnonymousOnlyReport]).discover()
        assert any_visible(descriptors, ALICE)
        assert any_visible(descriptors, ANONYMOUS)
        assert not any_visible(descriptors, BOB)

    def test_visible_descriptors_keeps_order(self):
        descriptors = ReportRegistry([AnonymousOnlyReport, AdminOnlyReport]).discover()
        visible = visible_descriptors(descriptors, ALICE)
        assert [d.type_id for d in visible] == ["AdminOnlyReport"]

    def test_ambient_viewer(self):
        descriptors = ReportRegistry([AdminOnlyReport]).discover()
        assert any_visible(descriptors, current_viewer=lambda: ALICE)
        assert not any_visible(descriptors, ANONYMOUS, current_viewer=lambda: ALICE)
