class FakeGenerator:
    """Returns a canned payload (or raises) and records what it was asked."""

    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    async def generate(self, *, system: str, user: str, schema: dict):
        self.calls.append({"system": system, "user": user, "schema": schema})
        if self.error is not None:
            raise self.error
        return self.response
