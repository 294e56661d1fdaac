from app import create_app, db
from app.models import Game, GamePlayerStats, League, Player

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Player": Player,
        "League": League,
        "Game": Game,
        "GamePlayerStats": GamePlayerStats,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
