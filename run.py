# Eventlet monkey patching MUST be first before any other imports
import eventlet
eventlet.monkey_patch()

import os  # noqa: E402

from party_picks import create_app, db, socketio  # noqa: E402
from party_picks.models import Party, PartyMember, Prediction, Profile, Result  # noqa: E402

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Party": Party,
        "PartyMember": PartyMember,
        "Prediction": Prediction,
        "Profile": Profile,
        "Result": Result,
    }


if __name__ == "__main__":
    socketio.run(
        app,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 5000)),
        debug=app.config.get("DEBUG", False),
    )
