from __future__ import annotations

import asyncio
import json

from assistant_admin import build_console, load_config
from assistant_admin.errors import AdminConsoleError
from assistant_admin.utils.logger import setup_logger


async def repl():
    config = load_config()
    setup_logger(level=config.log_level)
    console = build_console(config)

    print("Admin console ready. Type /quit to exit. Examples:")
    print("  /login admin secret")
    print("  /set {\"temperature\": \"0.7\", \"maxTokens\": \"512\"}")
    print("  /save   /reset   /reload   /show   /logout")
    print("  anything else is sent as a live test prompt")

    await console.resume()
    while True:
        user_input = input("admin> ").strip()
        if user_input.lower() in {"/quit", "quit", "exit"}:
            break
        try:
            if user_input.startswith("/login "):
                _, username, password = user_input.split(" ", 2)
                await console.login(username, password)
            elif user_input == "/logout":
                console.logout()
            elif user_input.startswith("/set "):
                console.edit(json.loads(user_input[5:]))
            elif user_input == "/save":
                await console.save()
            elif user_input == "/reset":
                console.reset()
            elif user_input == "/reload":
                await console.reload()
            elif user_input == "/show":
                pass
            else:
                outcome = await console.run_test(user_input)
                if outcome.ok:
                    print("test>", outcome.output)
        except (AdminConsoleError, ValueError) as exc:
            print(f"Error: {exc}")
            continue

        state = console.snapshot()
        if user_input == "/show" or user_input.startswith(("/set", "/reset", "/reload", "/login")):
            print(json.dumps(state["settings"], indent=2))
        for key in ("message", "error"):
            if state[key]:
                print(f"{key}> {state[key]}")


def main():
    asyncio.run(repl())


if __name__ == "__main__":
    main()
