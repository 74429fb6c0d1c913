import logging

import coloredlogs

FMT = '{asctime} [{levelname}] {name}: {message}'


def logging_config(debug: bool = False, output_file: str = ""):
    level = logging.DEBUG if debug else logging.INFO
    coloredlogs.install(
        level=level,
        fmt=FMT,
        style='{',
        level_styles=dict(
            debug=dict(color=8, faint=True),
            info=dict(color=15),
            warning=dict(bold=True, color=13),
            error=dict(color=9, bold=True),
            critical=dict(bold=True, color=9),
        ),
    )

    if output_file:
        handler = logging.FileHandler(output_file, encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FMT, style='{'))
        logging.getLogger().addHandler(handler)

    # steam.py logs every gateway message at debug
    logging.getLogger('steam').setLevel(logging.INFO)
