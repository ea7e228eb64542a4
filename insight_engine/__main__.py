"""Run the API locally: ``python -m insight_engine`` or ``insight-engine``."""
import os

import uvicorn


def str_to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def main() -> None:
    uvicorn.run(
        "insight_engine.main:app",
        host=os.getenv("INSIGHT_ENGINE_HOST", "0.0.0.0"),
        port=int(os.getenv("INSIGHT_ENGINE_PORT", "4000")),
        reload=str_to_bool(os.getenv("INSIGHT_ENGINE_RELOAD"), False),
    )


if __name__ == "__main__":
    main()
