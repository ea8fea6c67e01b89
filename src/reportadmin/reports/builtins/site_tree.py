"""Content housekeeping reports over the site tree."""

from reportadmin.reports.base import Report
from reportadmin.reports.fields import Field, FieldSchema
from reportadmin.viewer import ViewerContext


class SiteTreeReport(Report):
    """Shared visibility for reports over the site tree.

    Stays abstract: only concrete subclasses are discovered.
    """

    def can_view(self, viewer: ViewerContext) -> bool:
        return viewer.has_permission("CMS_ACCESS_CMSMain", "ADMIN")


class BrokenLinksReport(SiteTreeReport):
    """Pages with links to missing pages or files."""

    title = "Broken links"
    description = "Pages with links to pages or files that no longer exist"

    def get_field_schema(self) -> FieldSchema:
        return FieldSchema(
            [
                Field(
                    "CheckSite",
                    "Check site",
                    kind="dropdown",
                    value="Published",
                    options={"Published": "Published site", "Draft": "Draft site"},
                ),
                Field(
                    "Reason",
                    "Problem in",
                    kind="dropdown",
                    value="",
                    options={
                        "": "Any",
                        "BROKENFILE": "Has broken file",
                        "BROKENLINK": "Has broken link",
                        "VPBROKENLINK": "Redirects to a missing page",
                    },
                ),
            ]
        )


class EmptyPagesReport(SiteTreeReport):
    """Pages with no content."""

    title = "Pages with no content"

    def get_field_schema(self) -> FieldSchema:
        return FieldSchema([Field("IncludeDrafts", "Include drafts", kind="checkbox")])


class RecentlyEditedReport(SiteTreeReport):
    """Pages edited within the last number of days."""

    title = "Pages edited recently"

    def get_field_schema(self) -> FieldSchema:
        return FieldSchema([Field("Days", "Edited in the last days", "number", 14)])
