# ===============================
# app.py - Eunoia entry point (flask --app app ..., gunicorn app:app)
# ===============================

import atexit
import os

from eunoia.app import create_app
from eunoia.store import get_store

app = create_app()

with app.app_context():
    atexit.register(get_store().close)


# ===============================
# Run App
# ===============================
if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=os.environ.get('FLASK_DEBUG') == '1')
