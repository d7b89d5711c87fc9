"""Constants for the agent decision state machine."""


class BehaviorConstants:
    """Movement profile, timers and thresholds for aggressive agents."""

    # --- Movement profile ---
    WANDER_SPEED = 2.1
    INVESTIGATE_SPEED = 2.8
    CHASE_SPEED = 3.6
    DETECT_RANGE = 12.0
    ATTACK_RADIUS = 1.3
    DAMAGE_PER_SECOND = 30.0
    # Agents are kept this far from obstacles when spawned.
    SPAWN_CLEARANCE = 0.6

    # --- Vision ---
    # Chasing agents keep the player "in range" out to detect_range * this.
    CHASE_LOSS_RANGE_FACTOR = 1.8
    LOST_SIGHT_LINGER = (2.0, 3.5)

    # --- Stimulus acceptance ---
    # A candidate closer than this to the current target is the same target.
    RETARGET_DISTANCE = 0.75
    LIGHT_LINGER = (4.5, 7.5)
    NOISE_LINGER = (2.5, 4.5)
    # Probability that a fresh noise interrupts a chase. Tuning knob only.
    CHASE_NOISE_OVERRIDE_CHANCE = 0.45
    # The override is only rolled when the player is further than
    # attack_radius * this (feeding is not imminent).
    CHASE_NOISE_OVERRIDE_RANGE_FACTOR = 3.0

    # --- State-local behavior ---
    ARRIVAL_DISTANCE = 0.6
    WANDER_ARRIVAL_DISTANCE = 0.5
    WANDER_RADIUS = 7.0
    LIGHT_LINGER_AT_SOURCE = (1.5, 3.0)

    # --- Timers set on entering a state ---
    CHASE_DECISION_TIMER = (0.5, 1.5)
    NO_PLAYER_IDLE = (0.5, 1.5)
    INVESTIGATE_DEFAULT_TIMER = (2.0, 4.0)
    INVESTIGATE_DECISION_TIMER = (2.0, 4.0)
    INVESTIGATION_EXPIRED_IDLE = (1.5, 2.5)
    INVESTIGATION_COMPLETE_IDLE = (1.0, 2.0)
    WANDER_DECISION_TIMER = (2.5, 4.5)
    WANDER_RETARGET_TIMER = (3.0, 6.0)
    IDLE_DECISION_TIMER = (1.0, 2.5)

    # Squared length under which a direction is treated as "no direction".
    MIN_MOVE_LENGTH_SQ = 0.01

    # --- Frame loop ---
    MAX_FRAME_STEP = 0.05
