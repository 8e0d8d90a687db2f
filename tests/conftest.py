import pytest

from plutoxbot.bot.models.result import ErrorKind, Result


class FakeStore:
    """In-memory stand-in for MessageStore with the same Result contract."""

    def __init__(self):
        self.users = {}
        self.messages = []
        self.fail_reads = False
        self.fail_writes = False
        self.raise_on_read = None

    async def find_user(self, user_id):
        if self.fail_reads:
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, "read failed")
        return Result.success(self.users.get(user_id))

    async def insert_user(self, user):
        if self.fail_writes:
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, "write failed")
        self.users.setdefault(user.id, user)
        return Result.success(user)

    async def ensure_user(self, user):
        found = await self.find_user(user.id)
        if not found.ok:
            return found
        if found.value is not None:
            return Result.success(False)
        inserted = await self.insert_user(user)
        return inserted if not inserted.ok else Result.success(True)

    async def insert_message(self, message):
        if self.fail_writes:
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, "write failed")
        stored = message.model_copy(update={"id": len(self.messages) + 1})
        self.messages.append(stored)
        return Result.success(stored)

    async def query_recent_messages(self, user_id, limit=5):
        if self.raise_on_read:
            raise self.raise_on_read
        if self.fail_reads:
            return Result.failure(ErrorKind.STORE_UNAVAILABLE, "read failed")
        rows = [m for m in self.messages if m.user_id == user_id]
        rows.sort(key=lambda m: m.id, reverse=True)
        return Result.success(rows[:limit])

    def rows(self, user_id, role=None):
        return [m for m in self.messages if m.user_id == user_id and (role is None or m.role == role)]


class FakeBackend:
    def __init__(self, text_result=None, image_result=None):
        self.text_result = text_result or Result.success("Hi there!")
        self.image_result = image_result or Result.success("https://cdn.example/cat.png")
        self.text_error = None
        self.text_calls = []
        self.image_calls = []

    async def generate_text(self, messages):
        self.text_calls.append(messages)
        if self.text_error:
            raise self.text_error
        return self.text_result

    async def generate_image(self, prompt):
        self.image_calls.append(prompt)
        return self.image_result


class FakeTransport:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_text(self, text, parse_mode=None):
        if self.fail:
            raise RuntimeError("telegram is down")
        self.sent.append(("text", text, parse_mode))

    async def send_image(self, locator, caption):
        if self.fail:
            raise RuntimeError("telegram is down")
        self.sent.append(("image", locator, caption))


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def transport():
    return FakeTransport()
