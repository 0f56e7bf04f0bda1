"""Source location tracking for error messages and diagnostics.

Provides SourceLocation dataclass for tracking positions and spans in CNI
source text. Used by the strict parser for error positions and by the linter
for diagnostic ranges.

Columns count Unicode scalar values (one per ``str`` character), not UTF-8
bytes. A CRLF pair counts as a single line break.

"""

from __future__ import annotations

from dataclasses import dataclass

Position = tuple[int, int]


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and diagnostics.

    All positions are 1-indexed (lineno and col_offset start at 1). The end
    position is exclusive, so a one character span at 3:5 ends at 3:6.

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column (1-indexed)
        end_lineno: Ending line number (optional)
        end_col_offset: Ending column (optional)
        source_file: Source file path (optional)

    Examples:
        >>> loc = SourceLocation(lineno=1, col_offset=5)
        >>> str(loc)
        '1:5'

        >>> SourceLocation.span((1, 1), (2, 4)).range_str()
        '1:1-2:4'

    """

    lineno: int
    col_offset: int
    end_lineno: int | None = None
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "file.cni:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @property
    def start(self) -> Position:
        return (self.lineno, self.col_offset)

    @property
    def end(self) -> Position:
        """End position, falling back to the start for point locations."""
        return (
            self.end_lineno if self.end_lineno is not None else self.lineno,
            self.end_col_offset if self.end_col_offset is not None else self.col_offset,
        )

    def range_str(self) -> str:
        """Format as ``LINE:COL-LINE:COL`` (the linter output format)."""
        (line, col), (end_line, end_col) = self.start, self.end
        return f"{line}:{col}-{end_line}:{end_col}"

    @classmethod
    def span(cls, start: Position, end: Position) -> SourceLocation:
        """Create a location from two ``(line, col)`` positions."""
        return cls(
            lineno=start[0],
            col_offset=start[1],
            end_lineno=end[0],
            end_col_offset=end[1],
        )

    @classmethod
    def point(cls, position: Position) -> SourceLocation:
        """Create a one character wide location at ``position``."""
        line, col = position
        return cls(lineno=line, col_offset=col, end_lineno=line, end_col_offset=col + 1)
