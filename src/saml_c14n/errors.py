"""
errors.py — saml-c14n Error Taxonomy

Coded errors for every way a document can fail to canonicalize. Each error
carries a stable code and a link to its documentation entry, so callers that
verify signatures can report exactly why the canonical bytes were not produced.
"""

from typing import Optional

__all__ = [
    "C14nError",
    "TokenizationError",
    "UnbalancedTagsError",
    "UnclosedTagsError",
    "MismatchedTagsError",
    "UnsupportedCanonicalizationKindError",
    "MalformedNamespaceReferenceError",
]

class C14nError(Exception):
    """Base class for all canonicalization errors."""
    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.context = context

        full_msg = f"[{code}] {message}"
        if context:
            full_msg += f" Context: {context}"

        super().__init__(full_msg)

    @property
    def doc_url(self) -> str:
        """Link to the human-readable documentation for this error."""
        return f"https://saml-c14n.readthedocs.io/errors/{self.code}"

# Input Errors (E0xx)
class TokenizationError(C14nError):
    def __init__(self, context: Optional[str] = None, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        super().__init__("C14N_E001", "The XML tokenizer rejected the input document.", context)

# Structure Errors (E1xx)
class UnbalancedTagsError(C14nError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("C14N_E100", "An end tag was found with no matching open element.", context)

class UnclosedTagsError(C14nError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("C14N_E101", "The document ended while elements were still open.", context)

class MismatchedTagsError(UnbalancedTagsError):
    def __init__(self, context: Optional[str] = None):
        C14nError.__init__(self, "C14N_E102", "An end tag does not name the element it closes.", context)

# Algorithm Errors (E2xx)
class UnsupportedCanonicalizationKindError(C14nError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("C14N_E200", "The requested canonicalization algorithm is not implemented.", context)

# Namespace Errors (E3xx)
class MalformedNamespaceReferenceError(C14nError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("C14N_E300", "A name references a namespace URI that no enclosing element declares.", context)
