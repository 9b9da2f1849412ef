from rich.pretty import pprint

from argwright import *
from argwright.converters import integer

__prog__ = "demo"


@command(shell=True)
def callback(
        file=Argument(),
        /,
        count=Option("-c", "--count", type=integer, default=1).restrict_to(min=1),
        size=Option("-s", "--size", type=integer).restrict_to(0, 10, clamp=True).pair(),
        *,
        debug=Flag("--debug", "-d"),
):
    pprint({"file": file, "count": count, "size": size, "debug": debug})


if __name__ == '__main__':
    pprint(callback)
    invoke(callback)
