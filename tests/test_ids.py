import random
import re

import actionlink


def test_format():

    for count in range(100):
        goal_id = actionlink.ids.generate('Fibonacci')
        assert re.fullmatch(r'Fibonacci\.[0-9a-f]{8}', goal_id)


def test_prefix_with_separator():

    goal_id = actionlink.ids.generate('arm.MoveArm')
    prefix, suffix = goal_id.rsplit('.', 1)

    assert prefix == 'arm.MoveArm'
    assert len(suffix) == 8


def test_source():

    first = actionlink.ids.generate('Fibonacci', random.Random(1234))
    second = actionlink.ids.generate('Fibonacci', random.Random(1234))
    third = actionlink.ids.generate('Fibonacci', random.Random(4321))

    assert first == second
    assert first != third


def test_alphabet():
    """ Every hexadecimal digit should turn up given enough draws.
    """

    source = random.Random(99)
    seen = set()

    for count in range(200):
        goal_id = actionlink.ids.generate('X', source)
        seen.update(goal_id[2:])

    assert seen == set(actionlink.ids.hex_digits)


def test_client_uses_source():

    node = actionlink.transport.local.LocalNode()

    client1 = actionlink.ActionClient(node, 'fibonacci', 'Fibonacci', source=random.Random(7))
    client2 = actionlink.ActionClient(node, 'fibonacci', 'Fibonacci', source=random.Random(7))

    assert client1.generate_goal_id() == client2.generate_goal_id()

    client1.shutdown()
    client2.shutdown()
    node.shutdown()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
