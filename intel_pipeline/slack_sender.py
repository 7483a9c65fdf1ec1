import requests

# Slack rejects webhook messages above roughly 40k characters.
MAX_SLACK_CHARS = 39000
TRUNCATION_NOTE = "\n\n_(truncated, see the saved report for the full text)_"


def clip_for_slack(text: str, limit: int = MAX_SLACK_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_NOTE)] + TRUNCATION_NOTE


def send_to_slack(webhook_url: str, text: str) -> None:
    resp = requests.post(webhook_url, json={"text": clip_for_slack(text)}, timeout=20)
    if resp.status_code >= 300:
        raise RuntimeError(f"Slack webhook failed: {resp.status_code} {resp.text}")
