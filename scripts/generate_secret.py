import secrets
import base64


def generate_secret():
    print("=== JWT Secret Key Generator ===\n")
    print("64-byte hex string (recommended for production):")
    print(secrets.token_hex(64))
    print("\n32-byte hex string (alternative):")
    print(secrets.token_hex(32))
    print("\n64-byte base64 string:")
    print(base64.b64encode(secrets.token_bytes(64)).decode())
    print("\nURL-safe base64 (no special chars):")
    print(secrets.token_urlsafe(64))

    print("\nCopy one of these keys into SECRET_KEY in your .env file.")
    print("Never commit the .env file to version control.")


if __name__ == "__main__":
    generate_secret()
