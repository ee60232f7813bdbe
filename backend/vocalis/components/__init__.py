"""
Command pipeline components.

- `contracts`: intent kinds and the AssistantIntent model
- `prompt_builder`: constrained prompt for the reasoning endpoint
- `response_normalizer`: untrusted model text -> AssistantIntent
- `throttle`: minimum interval between commands of one session
- `command_interpreter`: the end-to-end pipeline
"""
