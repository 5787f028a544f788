import os
import logging
import logging.config
from functools import lru_cache
from typing import Any, Dict, Optional

import yaml
from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from api.schemas import RevChangeSchema, RevResponse, RevUpdateRequest, WebhookResponse
from core.config import Config, ConfigError, config_path_from_env, load_config
from core.deploy import InvalidRevError, deploy_rev, handle_webhook, read_rev
from core.flake import RevUpdateError
from core.github import parse_payload
from core.ultron import UltronClient


def setup_logging():
    cfg_path = os.path.join("configs", "logging.yaml")
    if os.path.exists(cfg_path):
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            os.makedirs("logs", exist_ok=True)
            logging.config.dictConfig(config)
        except Exception as e:
            print(f"[logging] Failed to load logging.yaml: {e}")
            logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.INFO)


setup_logging()
logger = logging.getLogger("api")

HEALTHCHECK_BANNER = """
░█▀█░█░█░█▀▀░█░░░▀█▀░█░█░█▀▄░█▀▀
░█░█░█░█░█░█░█░░░░█░░█░█░█▀▄░▀▀█
░▀▀▀░▀▀▀░▀▀▀░▀▀▀░░▀░░▀▀▀░▀░▀░▀▀▀

SYSTEM STATUS: ONLINE
"""

app = FastAPI(
    title="green",
    version="0.1.0",
    description="Deployment webhooks for ultron: relay GitHub events and pin the flake rev.",
)


@lru_cache(maxsize=1)
def get_config() -> Config:
    path = config_path_from_env()
    config = load_config(path)
    logging.getLogger().setLevel(config.server.log_level.upper())
    logger.info("Loaded config from %s", path)
    return config


def get_notifier(config: Config = Depends(get_config)) -> Optional[UltronClient]:
    notifier = config.notifier
    if not notifier.enabled:
        return None
    return UltronClient(
        url=notifier.url,
        channel=notifier.channel,
        user=notifier.user,
        timeout=notifier.timeout,
    )


@app.exception_handler(RevUpdateError)
@app.exception_handler(InvalidRevError)
def unprocessable(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ConfigError)
@app.exception_handler(OSError)
def internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/healthcheck", response_class=PlainTextResponse)
def healthcheck() -> str:
    return HEALTHCHECK_BANNER


@app.post("/webhook", response_model=WebhookResponse)
def webhook(
    body: Dict[str, Any] = Body(...),
    config: Config = Depends(get_config),
    notifier: Optional[UltronClient] = Depends(get_notifier),
) -> WebhookResponse:
    logger.info("Received /webhook request")
    try:
        payload = parse_payload(body)
    except ValidationError as e:
        logger.error("Failed to extract webhook payload: %s", e)
        raise HTTPException(status_code=422, detail="unrecognized webhook payload")

    result = handle_webhook(payload, config, notifier)
    rev_change = None
    if result.rev_change is not None:
        rev_change = RevChangeSchema(
            old=result.rev_change.old,
            new=result.rev_change.new,
            changed=result.rev_change.changed,
        )
    return WebhookResponse(
        event=result.event,
        message=result.message,
        notified=result.notified,
        notify_error=result.notify_error,
        rev_change=rev_change,
    )


@app.get("/flake/rev", response_model=RevResponse)
def get_rev(config: Config = Depends(get_config)) -> RevResponse:
    rev = read_rev(config.flake.path, config.flake.input)
    return RevResponse(input=config.flake.input, rev=rev)


@app.put("/flake/rev", response_model=RevChangeSchema)
def put_rev(req: RevUpdateRequest, config: Config = Depends(get_config)) -> RevChangeSchema:
    logger.info("Received /flake/rev update to %s", req.rev)
    change = deploy_rev(config.flake.path, req.rev, config.flake.input)
    return RevChangeSchema(old=change.old, new=change.new, changed=change.changed)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_config().server.port)
