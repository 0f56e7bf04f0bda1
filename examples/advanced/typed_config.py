"""Load a CNI document straight into dataclasses."""

from dataclasses import dataclass, field

from cni_format import DeserializeError, from_str


@dataclass
class Database:
    url: str
    pool_size: int = 5


@dataclass
class AppConfig:
    name: str
    debug: bool = False
    database: Database | None = None
    labels: dict[str, str] = field(default_factory=dict)


SOURCE = """\
name = demo
debug = yes

[database]
url = `postgres://localhost/demo`
pool_size = 10

[labels]
team = platform
"""

print(from_str(SOURCE, AppConfig))

try:
    from_str("name = demo\ndebug = perhaps", AppConfig)
except DeserializeError as err:
    print("error:", err)
