"""Display-side derivations for an analysis record."""

from typing import List

from ..models.analysis import AnalysisResult

MAX_REPORTED_SOURCES = 3


def confidence_percent(result: AnalysisResult) -> int:
    """Verification confidence as a whole percentage, 0 when not numeric."""
    try:
        return round(float(result.verification_confidence) * 100)
    except (TypeError, ValueError):
        return 0


def official_count(result: AnalysisResult) -> int:
    """Official source count as a whole number, 0 when not numeric."""
    try:
        return int(result.official_sources_count)
    except (TypeError, ValueError):
        return 0


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def verification_badge(result: AnalysisResult) -> str:
    """One-line verification status shown under an assistant reply."""
    if result.is_verified:
        return f"Verified by {_plural(official_count(result), 'official source')}"
    if result.sources:
        return f"Found {_plural(len(result.sources), 'source')} (Unverified)"
    return "No sources found to verify claim"


def format_report(result: AnalysisResult) -> List[str]:
    """Render an analysis record as plain text lines.

    Args:
        result: Analysis record attached to an assistant message

    Returns:
        Report lines, metrics first, then up to three sources
    """
    status = "VERIFIED" if result.is_verified else "UNVERIFIED"
    lines = [
        f"Language: {result.language_full}",
        f"Urgency: {result.urgency}",
        f"Sentiment: {str(result.sentiment).upper()}",
        f"Emotion: {str(result.emotion).upper()}",
        f"{status} (confidence {confidence_percent(result)}%)",
    ]

    if result.sources:
        lines.append("Sources Checked:")
        for i, source in enumerate(result.sources[:MAX_REPORTED_SOURCES], 1):
            lines.append(f"  {i}. {source.title} - {source.source} <{source.url}>")
            if source.snippet:
                lines.append(f"     {source.snippet}...")

    if official_count(result) > 0:
        lines.append(
            f"Verified by {_plural(official_count(result), 'official source')}"
        )

    return lines
