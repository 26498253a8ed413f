import base64, json

def encode_cursor(obj: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(obj, separators=(",",":")).encode()).decode()

def decode_cursor(token: str | None) -> dict | None:
    if not token: return None
    try:
        return json.loads(base64.urlsafe_b64decode(token.encode()).decode())
    except ValueError:
        # binascii.Error and JSONDecodeError are both ValueError
        return None
