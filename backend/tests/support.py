"""Shared fixtures for the unittest-style test modules."""
import fitz

SAMPLE_RESUME = (
    "Jane Smith\n"
    "jane.smith@example.com | (555) 123-4567\n"
    "linkedin.com/in/janesmith\n"
    "Software Engineer at Acme Corp\n"
    "2018 - 2022\n"
    "Built services in Python and Docker\n"
    "Education\n"
    "Bachelor of Science, MIT, 2015\n"
)


class FakeApiError(Exception):
    """Looks like an SDK error carrying an HTTP status code."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class FakeModelClient:
    """
    Scripted stand-in for GeminiClient.

    `responses` maps model name to a response string, an exception to raise,
    or an async callable to await.
    """

    def __init__(self, responses):
        self.responses = dict(responses)
        self.calls = []

    async def generate(self, model, prompt):
        self.calls.append(model)
        result = self.responses.get(model, "")
        if isinstance(result, BaseException):
            raise result
        if callable(result):
            return await result()
        return result


def make_pdf(text=None):
    """Single-page PDF with `text` drawn on it, or a blank page when text is None."""
    document = fitz.open()
    page = document.new_page()
    if text:
        page.insert_text((72, 72), text, fontsize=11)
    data = document.tobytes()
    document.close()
    return data
