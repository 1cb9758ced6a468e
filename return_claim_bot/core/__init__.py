"""Pure transformations: modal state → Submission → row update payload."""
