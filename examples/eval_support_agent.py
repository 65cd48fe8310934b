"""
Support agent evals using an explicit registration hook.

The agent returns a chat-completion shaped dict, so tool names are read
from ``choices[].message.tool_calls``. Calling ``answer.run`` directly
checks timing and tool rules too; the runner only probes the output.
"""

import asyncio

from evalengine import HandleRegistry, register


async def answer_question(question: str) -> dict:
    await asyncio.sleep(0)
    if "order" in question.lower():
        return {
            "choices": [
                {
                    "message": {
                        "content": "Your order shipped yesterday.",
                        "tool_calls": [{"function": {"name": "lookup_order"}}],
                    }
                }
            ]
        }
    return {"choices": [{"message": {"content": "Happy to help with that question."}}]}


def register_evals(registry: HandleRegistry) -> None:
    answer = register(answer_question, name="support_answer", registry=registry)

    answer.for_all(lambda a: a.ensure_response_time_under(5000).ensure_doesnt_contain("sorry"))
    answer.for_input("Where is my order?", lambda a: a.ensure_contains("shipped"))
    answer.for_input("What are your hours?", lambda a: a.ensure_length_over(10))
    answer.for_all_containing("order", lambda a: a.tool_is_used("lookup_order"))
