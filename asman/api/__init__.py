"""HTTP routers for the ASman Lesson Studio API."""
