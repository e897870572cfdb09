import time

from actionlink import messages


def test_time_now():

    before = time.time()
    stamp = messages.Time.now()
    after = time.time()

    assert 0 <= stamp.nsecs < 1000000000
    assert before - 1 <= stamp.to_sec() <= after + 1


def test_goal_id_attribute():

    status = messages.GoalStatus(goal_id=messages.GoalID(id='Fibonacci.0badf00d'))

    feedback = messages.ActionFeedback(status=status, feedback={'sequence': [0]})
    result = messages.ActionResult(status=status, result={'sequence': [0, 1]})

    assert feedback.goal_id == 'Fibonacci.0badf00d'
    assert result.goal_id == 'Fibonacci.0badf00d'

    # The correlation key is derived, not part of the record.
    assert 'goal_id' not in result.to_dict()


def test_goal_unset_fields():

    d = messages.ActionGoal(goal={'order': 4}).to_dict()

    assert d == {'header': None, 'goal_id': None, 'goal': {'order': 4}}

    goal = messages.ActionGoal.from_dict(d)
    assert goal.header is None
    assert goal.goal_id is None
    assert goal.goal == {'order': 4}


def test_nested_from_dict():

    d = {
        'header': {'seq': 3, 'stamp': {'secs': 10, 'nsecs': 20}, 'frame_id': ''},
        'status_list': [
            {'goal_id': {'stamp': {'secs': 1, 'nsecs': 0}, 'id': 'a.00000000'}, 'status': 1, 'text': ''},
            {'goal_id': {'stamp': {'secs': 2, 'nsecs': 0}, 'id': 'b.00000000'}, 'status': 3, 'text': 'done'},
        ],
    }

    array = messages.GoalStatusArray.from_dict(d)

    assert array.header.seq == 3
    assert array.header.stamp == messages.Time(10, 20)
    assert [s.goal_id.id for s in array.status_list] == ['a.00000000', 'b.00000000']
    assert array.status_list[1].status == messages.SUCCEEDED
    assert array.to_dict() == d


def test_missing_fields():

    result = messages.ActionResult.from_dict({})

    assert result.goal_id == ''
    assert result.result == {}
    assert result.status.status == messages.PENDING


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
