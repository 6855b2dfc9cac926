"""Sign a parameter set or verify a callback from the command line."""
import argparse
import json
import sys

from haozpay.common.errors import HaozPayError
from haozpay.crypto.canonical import build_sign_string, digest_hex
from haozpay.crypto.sign import generate_sign, verify_sign


def load_params(params_path: str) -> dict:
    """Load a flat JSON object of parameters."""
    with open(params_path, "r", encoding="utf-8") as f:
        params = json.load(f)
    if not isinstance(params, dict):
        raise ValueError(f"{params_path} must contain a JSON object")
    return params


def load_key(key_path: str) -> str:
    with open(key_path, "r") as f:
        return f.read()


def sign_params(params_path: str, key_path: str, merchant_no: str = None, timestamp: int = None) -> str:
    """
    Sign the parameters in a JSON file.

    Args:
        params_path: JSON object of request parameters
        key_path: Merchant private key (PEM or bare base64)
        merchant_no: Injected as merchantNo, if given
        timestamp: Injected as timestamp (ms), if given

    Returns:
        Base64 signature
    """
    params = load_params(params_path)
    if merchant_no:
        params["merchantNo"] = merchant_no
    if timestamp is not None:
        params["timestamp"] = timestamp

    sign_string = build_sign_string(params)
    print(f"[*] Sign string: {sign_string}")
    print(f"[*] SHA-256: {digest_hex(sign_string)}")

    signature = generate_sign(params, load_key(key_path))
    print(f"[+] sign: {signature}")
    return signature


def verify_params(params_path: str, key_path: str, signature: str = None, unpad: bool = False) -> bool:
    """
    Verify callback parameters in a JSON file.

    The signature is taken from the "sign" field unless given explicitly.
    """
    params = load_params(params_path)
    signature = signature or params.get("sign")
    if not signature:
        print("[!] No signature: pass --signature or include a \"sign\" field")
        return False

    print(f"[*] Sign string: {build_sign_string(params)}")
    try:
        verify_sign(params, signature, load_key(key_path), unpad=unpad)
    except HaozPayError as e:
        print(f"[!] Verification FAILED ({type(e).__name__}): {e}")
        return False

    print("[+] Signature verified")
    return True


def main():
    parser = argparse.ArgumentParser(description="HaozPay request signing tool")
    sub = parser.add_subparsers(dest="command", required=True)

    sign_cmd = sub.add_parser("sign", help="Sign a JSON parameter file")
    sign_cmd.add_argument("params", help="JSON file with request parameters")
    sign_cmd.add_argument("--key", required=True, help="Merchant private key file")
    sign_cmd.add_argument("--merchant-no", help="Inject merchantNo")
    sign_cmd.add_argument("--timestamp", type=int, help="Inject timestamp (Unix ms)")

    verify_cmd = sub.add_parser("verify", help="Verify a callback JSON parameter file")
    verify_cmd.add_argument("params", help="JSON file with callback parameters")
    verify_cmd.add_argument("--key", required=True, help="Platform public key file")
    verify_cmd.add_argument("--signature", help="Base64 signature (default: params[\"sign\"])")
    verify_cmd.add_argument(
        "--unpad",
        action="store_true",
        help="Strip type 1 padding before comparing (for signatures made by this SDK)"
    )

    args = parser.parse_args()

    try:
        if args.command == "sign":
            sign_params(args.params, args.key, args.merchant_no, args.timestamp)
        elif not verify_params(args.params, args.key, args.signature, args.unpad):
            sys.exit(1)
    except (OSError, TypeError, ValueError, HaozPayError) as e:
        print(f"[!] Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
