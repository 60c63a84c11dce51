"""
Bone id to bone name table for the SF3 character skeleton.

Ids are the values stored in an animation's bone table. Names match the
joint names used by the exchange formats (GLTF/FBX) downstream tools expect.
"""

from typing import Dict, Optional

BONE_NAMES: Dict[int, str] = {
    0: "pelvis", 1: "stomach", 2: "chest", 3: "neck", 4: "head", 5: "hair", 6: "hair1",
    7: "zero_joint_hand_l", 8: "clavicle_l", 9: "arm_l", 10: "forearm_l",
    11: "forearm_twist_l", 12: "hand_l", 13: "weapon_l", 14: "f_big1_l", 15: "f_big2_l",
    16: "f_big3_l", 17: "f_main1_l", 18: "f_main2_l", 19: "f_main3_l", 20: "f_pointer1_l",
    21: "f_pointer2_l", 22: "f_pointer3_l", 23: "scapular_l", 24: "chest_l",
    25: "zero_joint_hand_r", 26: "clavicle_r", 27: "arm_r", 28: "forearm_r",
    29: "forearm_twist_r", 30: "hand_r", 31: "weapons_r", 32: "f_big1_r", 33: "f_big2_r",
    34: "f_big3_r", 35: "f_main1_r", 36: "f_main2_r", 37: "f_main3_r", 38: "f_pointer1_r",
    39: "f_pointer2_r", 40: "f_pointer3_r", 41: "scapular_r", 42: "chest_r",
    43: "zero_joint_pelvis_l", 44: "thigh_l", 45: "calf_l", 46: "foot_l", 47: "toe_l",
    48: "back_l", 49: "chest_h_49", 50: "stomach_h_50",
    51: "zero_joint_pelvis_r", 52: "thigh_r", 53: "calf_r", 54: "foot_r", 55: "toe_r",
    56: "back_r", 57: "biceps_twist_l", 58: "biceps_twist_r", 59: "thigh_twist_l",
    60: "thigh_twist_r", 61: "foot_r_extra", 62: "toe_r_extra", 63: "weapon_r_extra",
    64: "weapon_l_extra", 65: "root_extra",
}

BONE_IDS: Dict[str, int] = {name: bone_id for bone_id, name in BONE_NAMES.items()}


def bone_name(bone_id: int) -> str:
    """Name for a bone id, or bone_<id> for ids outside the table."""
    return BONE_NAMES.get(bone_id, f"bone_{bone_id}")


def bone_id(name: str) -> Optional[int]:
    return BONE_IDS.get(name)
