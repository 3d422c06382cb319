# memecoin

Building blocks for a service that manages meme coins. Each coin has a name,
a description and a popularity score that goes up by one every time the coin
is poked. Coins are stored in MySQL through SQLAlchemy and identified by
64-bit snowflake IDs.

## Installing

```
pip install .
```

Connections are made with the `mysql+pymysql` driver, so install PyMySQL
alongside the package if you want to reach a database:

```
pip install pymysql
```

For running the tests:

```
pip install ".[test]"
pytest
```

## What is in the package

| Module | What it gives you |
|--------|-------------------|
| `memecoin.model` | `MemeCoin` aggregate (`create`, `rebuild`, `update_description`, `poke`), `PopularityScore`, `UpdatableFields`, `parse_id`, `new_created_event` |
| `memecoin.dddcore` | `AggregateRoot` and `DomainEvent` |
| `memecoin.snowflake` | `Snowflake` id generator, process-wide `init` / `new_id`, `device_id` |
| `memecoin.messages` | Command and query dataclasses for the services |
| `memecoin.domain_service` | `MemeCoinDomainService`: create, get, update, delete and poke inside transactions |
| `memecoin.app_service` | `MemeCoinAppService`: the same operations, returning response DTOs |
| `memecoin.dto` | `CreateMemeCoinRequest`, `UpdateMemeCoinRequest` (with `from_json` and `validate`), `CreateMemeCoinResponse`, `GetMemeCoinResponse` |
| `memecoin.repository` | `MemeCoinRepository` interface and `DaoMemeCoinRepository` |
| `memecoin.dao` | `MemeCoinRecord` table mapping and `MemeCoinDao` |
| `memecoin.database` | `TransactionManager` and `SessionTransactionManager` (nested calls use savepoints) |
| `memecoin.mysqlx` | `build_url` and `create_client` (pooled engine, checked with `SELECT 1`) |
| `memecoin.migration` | `Migration`, `get_migrations`, `auto_migrate` |
| `memecoin.conf` | `load_config` and the `Config` dataclasses |
| `memecoin.logs` | `Logger` writing one JSON object per line, `Level`, `parse_level` |
| `memecoin.errors` | `CustomError` with code, `Status` and message, the predefined errors, `wrap`, `cause`, `cause_custom_error`, `stack_trace` |
| `memecoin.responses` | `Response` envelope and `ok`, `empty`, `error` |
| `memecoin.gcontext` | `Source`, `parse_source` and helpers for per-request values |
| `memecoin.crypto` | XChaCha20-Poly1305 `encrypt` / `decrypt`, `encrypt_json`, `generate_key` |
| `memecoin.trace` | `new_trace_id`, `current_trace_id`, `use_trace_id` |
| `memecoin.middleware` | Flask hooks `register_trace` and `register_request_logger` |
| `memecoin.injection` | `build_injection`, which wires everything into an `Injection` |

## Configuration

`memecoin.conf.load_config(config_dir="config")` reads `config.yaml` (or
`config.yml`) from the given directory. An environment variable named after
the dotted key in upper case, with dots turned into underscores, overrides the
file (for example `MYSQL_HOST`, `SERVER_PORT`, `MYSQL_MAXIDLE`). Every key is
required and must be non-empty and non-zero; otherwise `ConfigError` is raised.

```yaml
server:
  name: meme-coin
  port: "8080"
  version: 1.0.0
log:
  level: info        # debug, info, warning, error, critical, alert, emergency
mysql:
  host: localhost
  port: 3306
  username: user
  password: password
  database: meme_coin
  maxidle: 10
  maxopen: 20
```

`memecoin.injection.build_injection(config_dir="config")` first loads a `.env`
file from the working directory if there is one, then loads the configuration,
creates the logger, initialises the snowflake generator, connects to MySQL,
applies pending migrations and returns an `Injection` holding `config`,
`logger` and `meme_coin_app_service`. If the database cannot be reached or
migrated, it logs at emergency level and exits with status 1.

## Migrations

`auto_migrate(engine, base_dir="migrations")` records applied migrations in a
`migrations` table and runs the ones not yet applied. The single migration,
`20240215_create_meme_coin_table`, executes the SQL in
`<base_dir>/20240215_create_meme_coin_table.up.sql`. The SQL files are not
shipped with the package; you provide them. Rows live in the
`meme_coin.meme_coin` table.

## Examples

```python
from memecoin import snowflake
from memecoin.logs import Logger, Level
from memecoin.model import MemeCoin

logger = Logger(service_name="demo", level=Level.DEBUG)
snowflake.init(logger)   # needs a non-loopback IPv4 address on this host

coin = MemeCoin.create("Doge", "much wow")
coin.poke()
print(coin.id, coin.popularity_score.value)   # ..., 1
```

Response envelopes and errors:

```python
from memecoin import errors, responses

responses.ok({"id": "123"}).to_dict()
# {'code': 0, 'msg': 'ok', 'data': {'id': '123'}}

err = errors.NAME_ALREADY_EXISTS.wrap(ValueError("duplicate"), "name already exists")
found = errors.cause_custom_error(errors.wrap(err, "save"))
found.code, int(found.status.to_http_status())
# (809103002, 409)
```

Payload encryption under a key derived from a user id:

```python
from memecoin.crypto import generate_key, encrypt, decrypt

key = generate_key("user-42")
sealed = encrypt(b"hello", key)
assert decrypt(sealed, key) == b"hello"
```

Request tracing and logging on your own Flask application:

```python
from flask import Flask
from memecoin.logs import Logger
from memecoin.middleware import register_trace, register_request_logger

app = Flask(__name__)
register_trace(app, "demo")              # trace id from `traceparent`, or a new one
register_request_logger(app, Logger())   # one log entry per request
```

## What the package does not do

There is no HTTP server, no route handlers and no command to start a service.
The package provides the domain model, persistence, services, request and
response shapes, encryption and Flask request hooks, but you register routes
on a Flask application and run it yourself.