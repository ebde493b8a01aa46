# ABOUTME: Rich rendering for connection records and parsed profiles.
# ABOUTME: Provides ConnectionTable for result lists and ProfilePanel for a single profile.

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from linkedin_relay.models import ConnectionRecord, ProfileRecord


def _truncate(text: str | None, max_length: int) -> str:
    """Truncate text to max length with ellipsis; None becomes an empty string."""
    if text is None:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


class ConnectionTable:
    """Renders ConnectionRecord data as Rich tables.

    Creates formatted tables with color-coded connection degrees,
    truncated long text, and row numbers.
    """

    MAX_HEADLINE_LENGTH = 40
    MAX_LOCATION_LENGTH = 20

    DEGREE_COLORS: dict[str, str] = {
        "1st": "green",
        "2nd": "yellow",
        "3rd": "red",
    }

    def _get_degree_styled(self, degree: str | None) -> str:
        """Color the degree label; unknown labels are shown plain."""
        if not degree:
            return ""
        for label, color in self.DEGREE_COLORS.items():
            if label in degree:
                return f"[{color}]{degree}[/{color}]"
        return degree

    def render(self, connections: list[ConnectionRecord], title: str | None = None) -> Table:
        """Render connection records as a Rich Table.

        Args:
            connections: Records to display.
            title: Optional title for the table.

        Returns:
            Rich Table with formatted connection data.
        """
        table = Table(title=title, show_lines=False)

        table.add_column("#", style="dim", width=4)
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Headline", style="white", max_width=self.MAX_HEADLINE_LENGTH)
        table.add_column("Location", style="green", max_width=self.MAX_LOCATION_LENGTH)
        table.add_column("Degree", style="yellow", width=8)
        table.add_column("Premium", width=7)

        for idx, connection in enumerate(connections, 1):
            table.add_row(
                str(idx),
                connection.name,
                _truncate(connection.headline, self.MAX_HEADLINE_LENGTH),
                _truncate(connection.location, self.MAX_LOCATION_LENGTH),
                self._get_degree_styled(connection.connection_degree),
                "[gold1]yes[/gold1]" if connection.is_premium else "",
            )

        return table


class ProfilePanel:
    """Renders a ProfileRecord as a panel with its sections as tables."""

    MAX_ABOUT_LENGTH = 280

    def render(self, profile: ProfileRecord) -> Panel:
        header = Text()
        header.append(f"{profile.name or 'Unknown'}\n", style="bold cyan")
        if profile.title:
            header.append(f"{profile.title}\n", style="white")
        if profile.location:
            header.append(f"{profile.location}\n", style="green")

        counts = []
        if profile.connections_count is not None:
            counts.append(f"{profile.connections_count} connections")
        if profile.followers_count is not None:
            counts.append(f"{profile.followers_count} followers")
        if profile.mutual_connections_count is not None:
            counts.append(f"{profile.mutual_connections_count} mutual")
        if counts:
            header.append(" | ".join(counts) + "\n", style="dim")
        if profile.about:
            header.append("\n" + _truncate(profile.about, self.MAX_ABOUT_LENGTH) + "\n", style="italic")

        parts: list = [header]
        if profile.experience:
            experience = Table(title="Experience", show_header=True)
            experience.add_column("Title", style="cyan")
            experience.add_column("Company", style="magenta")
            experience.add_column("Duration", style="dim")
            for entry in profile.experience:
                experience.add_row(entry.title, entry.company or "", entry.duration or "")
            parts.append(experience)
        if profile.education:
            education = Table(title="Education", show_header=True)
            education.add_column("School", style="cyan")
            education.add_column("Degree", style="magenta")
            education.add_column("Field", style="white")
            for school in profile.education:
                education.add_row(school.school, school.degree or "", school.field_of_study or "")
            parts.append(education)
        if profile.skills:
            parts.append(Text("Skills: " + ", ".join(s.name for s in profile.skills), style="green"))

        title = "Profile" + (" (Premium)" if profile.is_premium else "")
        return Panel(Group(*parts), title=title, border_style="cyan", padding=(1, 2))
