import datetime
import sys

def print_status(*args, file=None):
    """
    Output timestamp and space concatenated arguments. Status lines go to
    stderr unless another stream is given, so that they never mix with the
    converted values.
    """

    timestamp = str(datetime.datetime.now())
    print(" ".join((timestamp,) + tuple(map(str, args))),
          file=file if file is not None else sys.stderr)
