from icicle import *

__prog__ = "human"

program = Command("human", "A tiny calculator that is polite, too")


@program.command("greet", "Greets everyone by name").array_argument("Names").action
def greet(arguments):
    for name in arguments:
        print(f"Hello, {name}!")


def add(arguments):
    x = arguments.get_or("-x", "--x", type=int, default=0)
    y = arguments.get_or("-y", "--y", type=int, default=0)
    print(f"{x} + {y} = {x + y}")


def infinite(arguments):
    print(sum(arguments.range(0, len(arguments), type=int)))


program.command("add", "Adds two numbers") \
    .option("-x, --x", "First number") \
    .option("-y, --y", "Second number") \
    .action(add) \
    .command("infinite", "Adds every number given") \
    .array_argument("Numbers") \
    .action(infinite)


if __name__ == '__main__':
    raise SystemExit(program.run())
