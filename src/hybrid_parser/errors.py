"""Exception hierarchy for the hybrid parser.

None of these escape ``HybridParser.parse``: extractor and fallback failures are
caught at the orchestrator boundary and folded into the returned AST.
"""


class HybridParserError(Exception):
    """Base class for all errors raised inside the package."""


class ExtractionError(HybridParserError):
    """A provider extractor could not read the payload it was handed.

    Raised when the raw text is not valid JSON or the decoded value is not a
    JSON object or array.
    """


class FallbackParserError(HybridParserError):
    """The text fallback parser raised despite its never-raise contract."""

    def __init__(self, parser_name: str, cause: Exception):
        self.parser_name = parser_name
        self.cause = cause
        super().__init__(f"{parser_name} failed: {cause}")
