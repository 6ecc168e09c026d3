"""
Tests for core configuration, topology and data model
"""

import numpy as np
import pytest


def test_core_config():
    """Test configuration defaults and validation"""
    from pafpose.core.config import PAFPoseConfig, PeakConfig, LimbConfig, AssemblyConfig
    from pafpose.core.exceptions import ConfigError

    config = PAFPoseConfig()
    assert config.peaks.confidence_threshold == 0.1
    assert config.peaks.min_peaks_distance == 3.0
    assert config.limbs.mid_points_score_threshold == 0.05
    assert config.limbs.found_mid_points_ratio_threshold == 0.8
    assert config.limbs.num_sample_points == 10
    assert config.assembly.min_subset_score == 0.2
    assert config.assembly.min_joints_number == 3
    print("✓ PAFPoseConfig defaults")

    with pytest.raises(ConfigError):
        LimbConfig(num_sample_points=1)
    with pytest.raises(ConfigError):
        LimbConfig(found_mid_points_ratio_threshold=1.5)
    with pytest.raises(ConfigError):
        AssemblyConfig(min_joints_number=0)
    with pytest.raises(ConfigError):
        PeakConfig(min_peaks_distance=-1.0)
    with pytest.raises(ConfigError):
        PAFPoseConfig(num_workers=-2)
    print("✓ Config validation")


def test_core_config_yaml(tmp_path):
    """Test YAML save/load round trip and the packaged defaults"""
    from pafpose.core.config import PAFPoseConfig, PeakConfig
    from pafpose.core.exceptions import ConfigError

    config = PAFPoseConfig(peaks=PeakConfig(confidence_threshold=0.25), num_workers=2)
    yaml_path = tmp_path / "nested" / "decoder.yaml"
    config.to_yaml(str(yaml_path))
    assert yaml_path.exists()

    loaded = PAFPoseConfig.from_yaml(str(yaml_path))
    assert loaded.peaks.confidence_threshold == 0.25
    assert loaded.num_workers == 2
    assert loaded.to_dict() == config.to_dict()
    print("✓ YAML round trip")

    assert PAFPoseConfig.default().to_dict() == PAFPoseConfig().to_dict()
    print("✓ Packaged default config")

    bad_keys = tmp_path / "bad.yaml"
    bad_keys.write_text("peaks:\n  threshold: 0.3\n")
    with pytest.raises(ConfigError):
        PAFPoseConfig.from_yaml(str(bad_keys))

    with pytest.raises(FileNotFoundError):
        PAFPoseConfig.from_yaml(str(tmp_path / "missing.yaml"))
    print("✓ YAML errors")


def test_core_config_env(monkeypatch):
    """Test environment overrides"""
    from pafpose.core.config import PAFPoseConfig
    from pafpose.core.exceptions import ConfigError

    monkeypatch.setenv("PAFPOSE_CONFIDENCE_THRESHOLD", "0.3")
    monkeypatch.setenv("PAFPOSE_MIN_JOINTS_NUMBER", "5")
    monkeypatch.setenv("PAFPOSE_NUM_WORKERS", "0")
    config = PAFPoseConfig.from_env()
    assert config.peaks.confidence_threshold == 0.3
    assert config.assembly.min_joints_number == 5
    assert config.num_workers == 0
    print("✓ Environment overrides")

    monkeypatch.setenv("PAFPOSE_NUM_SAMPLE_POINTS", "ten")
    with pytest.raises(ConfigError):
        PAFPoseConfig.from_env()

    monkeypatch.setenv("PAFPOSE_NUM_SAMPLE_POINTS", "1")
    with pytest.raises(ConfigError):
        PAFPoseConfig.from_env()
    print("✓ Environment validation")


def test_core_topology():
    """Test limb table validation"""
    from pafpose.core.topology import Topology
    from pafpose.core.exceptions import TopologyError
    from pafpose.core.constants import OPENPOSE_NUM_KEYPOINTS, OPENPOSE_NUM_PAFS

    openpose = Topology.openpose()
    assert openpose.num_keypoints == OPENPOSE_NUM_KEYPOINTS == 18
    assert len(openpose) == 19
    assert openpose.num_pafs == OPENPOSE_NUM_PAFS == 38
    assert openpose.keypoint_names[1] == 'neck'
    assert (openpose[0].type_a, openpose[0].type_b) == (1, 2)
    print("✓ OpenPose topology")

    chain = Topology([(0, 1, 0, 1), (1, 2, 2, 3)])
    assert chain.num_keypoints == 3
    assert chain.num_pafs == 4
    print("✓ Custom topology")

    # keypoint type 3 has no limb
    with pytest.raises(TopologyError):
        Topology([(0, 1, 0, 1), (1, 2, 2, 3)], num_keypoints=4)
    with pytest.raises(TopologyError):
        Topology([(0, 5, 0, 1)], num_keypoints=3)
    with pytest.raises(TopologyError):
        Topology([(0, 0, 0, 1)], num_keypoints=1)
    with pytest.raises(TopologyError):
        Topology([(0, 1, -1, 1)])
    with pytest.raises(TopologyError):
        Topology([])
    with pytest.raises(TopologyError):
        Topology([(0, 1, 0, 1)], keypoint_names=['a', 'b', 'c'])
    print("✓ Topology validation")


def test_core_types():
    """Test data model helpers"""
    from pafpose.core.types import Candidate, Pose, PoseSubset, scale_poses
    from pafpose.core.constants import ABSENT_ID, ABSENT_COORDINATE

    candidate = Candidate(keypoint_type=2, x=10.5, y=4.0, confidence=0.8, id=0)
    renumbered = candidate.with_id(7)
    assert renumbered.id == 7 and candidate.id == 0
    assert renumbered.position == (10.5, 4.0)
    with pytest.raises(Exception):
        candidate.x = 3.0
    print("✓ Candidate immutability")

    first = PoseSubset.empty(4)
    first.assign(0, 10, 1.5)
    first.assign(1, 11, 1.0)
    assert first.num_joints == 2 and first.score == 2.5
    assert first.has(0) and not first.has(2)

    second = PoseSubset.empty(4)
    second.assign(2, 12, 1.0)
    assert not first.conflicts_with(second)
    first.absorb(second, 0.5)
    assert first.peak_ids == [10, 11, 12, ABSENT_ID]
    assert first.num_joints == 3
    assert first.score == pytest.approx(4.0)
    assert first.conflicts_with(second)
    print("✓ PoseSubset merge")

    pose = Pose(keypoints=((1.0, 2.0), ABSENT_COORDINATE, (3.0, 4.0)), score=2.0)
    assert pose.num_keypoints == 2
    assert pose.is_present(0) and not pose.is_present(1)
    arr = pose.to_array()
    assert arr.shape == (3, 2)
    np.testing.assert_allclose(arr[1], [-1.0, -1.0])
    assert pose.to_named(['a', 'b', 'c']) == {'a': (1.0, 2.0), 'b': None, 'c': (3.0, 4.0)}

    scaled = scale_poses([pose], 2.0, 3.0)[0]
    assert scaled.keypoints == ((2.0, 6.0), ABSENT_COORDINATE, (6.0, 12.0))
    assert scaled.score == pose.score
    print("✓ Pose helpers")
