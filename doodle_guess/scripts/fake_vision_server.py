"""
Fake chat-completions server for running the game without a DashScope key.

Answers POST /v1/chat/completions with a random guess in the OpenAI response
shape. Point the app at it with:

    DASHSCOPE_BASE_URL=http://127.0.0.1:9000/v1 DASHSCOPE_API_KEY=dummy

Usage:
    python -m doodle_guess.scripts.fake_vision_server
    FAKE_STATUS=429 python -m doodle_guess.scripts.fake_vision_server   # simulate upstream errors
"""

import os
import random
import asyncio
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

app = FastAPI(title="fake-vision-server")

GUESSES = ["猫", "房子", "太阳", "树", "汽车", "小鱼"]
FAKE_STATUS = int(os.getenv("FAKE_STATUS", "200"))
FAKE_DELAY_S = float(os.getenv("FAKE_DELAY_S", "0.5"))


@app.post("/v1/chat/completions")
async def chat_completions(request: Request):
    body = await request.json()
    auth = request.headers.get("authorization", "")
    print(f"[vision] model={body.get('model')} auth={'yes' if auth.startswith('Bearer ') else 'no'}")
    await asyncio.sleep(FAKE_DELAY_S)
    if FAKE_STATUS != 200:
        print(f"[vision] answering HTTP {FAKE_STATUS}")
        return JSONResponse(status_code=FAKE_STATUS, content={"error": {"message": "simulated failure"}})
    guess = random.choice(GUESSES)
    print(f"[vision] guess={guess}")
    return {
        "id": "fake-1",
        "object": "chat.completion",
        "model": body.get("model"),
        "choices": [{"index": 0, "message": {"role": "assistant", "content": guess}, "finish_reason": "stop"}],
    }


if __name__ == "__main__":
    print("Fake vision server starting on http://localhost:9000")
    uvicorn.run(app, host="0.0.0.0", port=9000)
