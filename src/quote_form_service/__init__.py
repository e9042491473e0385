"""
Internal library package for quote-form-service.

This package holds the quote wizard building blocks (question schemas, the
conditional visibility evaluator, the wizard view-model, submission shaping
and authoring checks).

- Runtime package: `src/quote_form_service/`
- HTTP entrypoint: `api/main.py`
"""
