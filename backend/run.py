from dotenv import load_dotenv

load_dotenv(override=False)

from arena import create_app, socketio  # noqa: E402

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    app.logger.info(f"[startup] port={app.config['PORT']}")
    socketio.run(app, host='0.0.0.0', port=app.config['PORT'], debug=True)
