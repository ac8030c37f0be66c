# chatadapter

Building blocks for a service that puts an OpenAI-style chat completion API
in front of other chat back ends.

## What is in the package

- **`chatadapter.model`**: the request and response models.
  - `ChatCompletion.from_dict` and `ChatGeneration.from_dict` build a request
    from a decoded JSON body. They use the wire field names (`stop`, `topK`,
    `topP`, `prompt`, ...). If a field has the wrong type, they raise
    `TypeError`.
  - `to_dict()` turns each model back into a JSON-ready dictionary.
    `ChatChoice` and `ChatResponse` drop empty optional parts (`error`,
    `usage`, empty message fields).
  - `Keyv` is a `dict` with typed lookups: `get_string`, `get_keyv`,
    `get_slice`, `matches`, `among` and `is_string`. Its `str()` is compact
    JSON with sorted keys.
- **`chatadapter.config`**: configuration handling.
  - `load_config(path="config.yaml")` reads a YAML file and returns its
    top-level mapping.
  - `init_config(path)` loads that file and stores the result.
  - `get_config()` returns the stored mapping. It raises `RuntimeError` if
    nothing has been stored yet.
- **`chatadapter.errors`**: `wrap_error(err)` wraps an exception in a
  `StackError` that records the caller's file and line. It returns `None` when
  given `None`. `StackError.origin_error()` returns the innermost wrapped
  exception.
- **`chatadapter.logger`**: logging setup.
  - `init_logger(base_path="", level=logging.INFO)` sends records to stdout
    and to `background-YYYY-MM-DD.log` in `base_path` (default `log`). When the
    log is written to on a new day, output moves to that day's file. When the
    logger starts or changes file, it deletes log files older than seven days.
  - Each line is formatted by `CallerFormatter`, in this shape:
    `time <package> file:line | [LEVL] message`.
  - `format_caller` renders the caller part of that line.
- **`chatadapter.vars`**: the shared constants.
  - Context key names such as `GIN_COMPLETION` and `GIN_TOOL`.
  - The `MatchState` enum (`DEFAULT`, `MATCHING`, `MATCHED`).
- **`chatadapter.toolcall`**: helpers that turn a model's plain-text reply into
  a structured tool call. A lookup that finds nothing returns the string
  `"-1"`.
  - `parse_tool_call` returns a `ToolCall`, or `None` if no tool can be found.
    It falls back to a default tool when one is given.
  - `parse_tool_tasks` reads a JSON task list from a reply.
  - `exclude_tasks` marks tasks whose tool has already run.
  - `name_with_tools`, `tool_id_with_tools`, `name_with_tools_not_args` and
    `tool_def` resolve tool names and ids.
  - `extract_tool_names`, `need_to_tool_call`, `tasks_enabled` and
    `tool_call_cancel` inspect a request or a reply.

## What it does not do

The package has no HTTP server and no command to start one. It does not
connect to any chat back end. It does not build prompts for the model or send
them. The caller sends the prompt, takes the model's reply text, and passes
that text to the `toolcall` helpers.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Example

```python
from chatadapter.model import ChatCompletion
from chatadapter.toolcall import parse_tool_call, name_with_tools

completion = ChatCompletion.from_dict({
    "model": "example-model",
    "messages": [{"role": "user", "content": "What's the weather in Paris?"}],
    "tools": [{
        "type": "function",
        "function": {
            "name": "get_weather",
            "description": "Look up the weather",
            "parameters": {"type": "object",
                           "properties": {"city": {"type": "string"}}},
        },
    }],
})

reply = 'TOOL_RESPONSE: {"toolId": "get_weather", "arguments": {"city": "Paris"}}'
call = parse_tool_call(reply, completion, "-1", [])
if call is not None:
    print(call.name, call.arguments)   # get_weather {"city":"Paris"}

print(name_with_tools("get_weather", completion.tools))  # get_weather
print(name_with_tools("unknown", completion.tools))      # -1
```

## Running the tests

```
pytest
```