"""Development server entry point."""

import os

from .factory import create_app


def main() -> None:
    app = create_app(os.environ.get('APP_ENV'))
    app.run(
        host=os.environ.get('HOST', '127.0.0.1'),
        port=int(os.environ.get('PORT', '5000')),
        debug=app.config.get('DEBUG', False),
    )


if __name__ == '__main__':
    main()
