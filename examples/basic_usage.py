"""
Basic SimStat Usage Examples

Run serially with ``python examples/basic_usage.py`` or across processes with
``mpiexec -n 4 python examples/basic_usage.py`` (requires ``simstat[mpi]``).
"""

import numpy as np

from simstat import SerialReducer, ThreadGroup, distributed_mean_and_error, mean_and_error


def example_1_local():
    """Example 1: mean and standard error on one process."""
    print("=" * 60)
    print("EXAMPLE 1: Local mean and error")
    print("=" * 60)

    m, err = mean_and_error([1.0, 2.0, 3.0])
    print(f"scalars:  mean={m:.4f} error={err:.4f}")

    rng = np.random.default_rng(0)
    samples = rng.normal(size=(1000, 3)) + 1j * rng.normal(size=(1000, 3))
    m, err = mean_and_error(samples)
    print(f"complex vectors:  mean={np.round(m, 3)} error={np.round(err, 4)}")


def example_2_thread_group():
    """Example 2: four ranks in one process, one of them without samples."""
    print("=" * 60)
    print("EXAMPLE 2: Thread group with an empty rank")
    print("=" * 60)

    parts = [[1.0, 2.0], [3.0], [], [2.0, 2.0]]
    results = ThreadGroup(len(parts)).map(distributed_mean_and_error, parts)
    m, err = results[0]
    print(f"global mean={m:.4f} error={err:.4f} (on all {len(results)} ranks)")


def example_3_mpi():
    """Example 3: MPI.COMM_WORLD, each rank holding its own samples."""
    try:
        from mpi4py import MPI
    except ImportError:
        print("mpi4py not installed; using a one-process group instead")
        comm, rank = SerialReducer(), 0
    else:
        comm = MPI.COMM_WORLD
        rank = comm.Get_rank()

    rng = np.random.default_rng(rank)
    local = rng.normal(loc=10.0, size=100 * (rank + 1))
    m, err = distributed_mean_and_error(comm, local)
    if rank == 0:
        print(f"MPI mean={m:.4f} error={err:.4f}")


if __name__ == "__main__":
    example_1_local()
    example_2_thread_group()
    example_3_mpi()
