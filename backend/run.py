from relay import create_app, socketio

app = create_app()

if __name__ == '__main__':
    app.logger.info(f"Middleware listening on port {app.config['PORT']}")
    socketio.run(app, host='0.0.0.0', port=app.config['PORT'], allow_unsafe_werkzeug=True)
