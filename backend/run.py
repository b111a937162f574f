import os

from ledger import create_app

app = create_app()
if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    print("\n" + "="*50)
    print(f"LEDGER SERVICE ON 0.0.0.0:{port}")
    print("="*50 + "\n")
    app.run(host='0.0.0.0', port=port, debug=os.environ.get("FLASK_DEBUG") == "1")
