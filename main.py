from rich.pretty import pprint

from flagpole import *

__prog__ = "flagpole-demo"
__docs__ = {
    FaultCode.UNMATCHED_FLAG: "Flags are matched exactly; abbreviations are not expanded.",
}

parser = ArgumentParser("This is a test program", "This is the big epilogue")
boolflag = parser.add_flag("BOOLFLAG", ('b', "bool"), help="This is a boolean flag")
invboolflag = parser.add_option("INVBOOLFLAG", ('i', "inverse"), type=bool, default=False, help="This is an inverse boolean flag")
doubleflag = parser.add_option("DUBFLAG", ('d', "double"), type=float, default=25.0, help="This is some double flag")


if __name__ == '__main__':
    parser.parsecli().trigger(shell=True, fancy=True)
    pprint(parser.registry)
