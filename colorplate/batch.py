"""Batch extraction over a whole tag tree.

A fixed set of worker slots, one per CPU by default, each guarded by a
lock. The scheduler walks the tag tree and, for every candidate, polls the
slots in order with a non-blocking acquire until one is free. The worker
thread releases its slot lock when it is done; the scheduler joins the old
thread before reusing the slot, so a slot never runs two tags at once.

After the walk every slot lock is taken (blocking) and every thread
joined, so nothing is still running when run_batch returns.
"""

import os
import threading
import time
from collections import namedtuple

from colorplate.common.console import ExtractContext
from colorplate.pipeline import TAG_EXTENSION, ExtractionOutcome, dump_tag

BatchReport = namedtuple('BatchReport', 'extracted attempted elapsed outcomes')


def worker_count(jobs=None):
    if jobs is None:
        jobs = os.cpu_count() or 1
    return max(1, jobs)


def find_tag_files(tags_root):
    """Yield every regular .bitmap file under ``tags_root``, relative to it.

    Directory symlinks are followed (each real directory once) and
    directories that cannot be listed are skipped.
    """
    seen = set()
    for dirpath, dirnames, filenames in os.walk(tags_root, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in seen:
            dirnames[:] = []
            continue
        seen.add(real)
        dirnames.sort()
        for name in sorted(filenames):
            if os.path.splitext(name)[1] != TAG_EXTENSION:
                continue
            path = os.path.join(dirpath, name)
            if os.path.isfile(path):
                yield os.path.relpath(path, tags_root)


class WorkerSlot:
    def __init__(self, index):
        self.index = index
        self.lock = threading.Lock()
        self.thread = None


class BatchScheduler:
    def __init__(self, context, workers=None):
        self.context = context
        self.slots = [WorkerSlot(i) for i in range(worker_count(workers))]
        self.outcomes = []
        self._outcomes_lock = threading.Lock()

    def claim(self):
        """Busy-poll the slots until one can be taken; return it.

        The slot comes back locked, with its previous thread joined.
        """
        while True:
            for slot in self.slots:
                if slot.lock.acquire(blocking=False):
                    if slot.thread is not None:
                        slot.thread.join()
                        slot.thread = None
                    return slot
            time.sleep(0)

    def launch(self, slot, tags_root, data_root, tag_path, overwrite):
        slot.thread = threading.Thread(
            target=self._work,
            args=(slot, tags_root, data_root, tag_path, overwrite),
            name=f"colorplate-slot-{slot.index}",
        )
        try:
            slot.thread.start()
        except RuntimeError:
            slot.thread = None
            slot.lock.release()
            raise

    def _work(self, slot, tags_root, data_root, tag_path, overwrite):
        try:
            try:
                outcome = dump_tag(tags_root, data_root, tag_path, self.context, overwrite)
            except Exception as e:
                message = f"{tag_path} failed unexpectedly ({e!r})"
                self.context.console.error(message)
                outcome = ExtractionOutcome(tag_path, False, message)
            with self._outcomes_lock:
                self.outcomes.append(outcome)
        finally:
            slot.lock.release()

    def drain(self):
        """Wait for every slot to go idle."""
        for slot in self.slots:
            slot.lock.acquire()
        for slot in self.slots:
            if slot.thread is not None:
                slot.thread.join()
                slot.thread = None
        for slot in self.slots:
            slot.lock.release()

    def run(self, tags_root, data_root, overwrite=False):
        extracted_before = self.context.extracted.value
        attempted = 0
        start = time.perf_counter()

        try:
            for tag_path in find_tag_files(tags_root):
                slot = self.claim()
                self.launch(slot, tags_root, data_root, tag_path, overwrite)
                attempted += 1
        finally:
            self.drain()

        elapsed = time.perf_counter() - start
        with self._outcomes_lock:
            outcomes = list(self.outcomes)
        return BatchReport(
            extracted=self.context.extracted.value - extracted_before,
            attempted=attempted,
            elapsed=elapsed,
            outcomes=outcomes,
        )


def run_batch(tags_root, data_root, overwrite=False, context=None, workers=None):
    """Extract every tag under ``tags_root`` into ``data_root``."""
    if context is None:
        context = ExtractContext()
    return BatchScheduler(context, workers).run(tags_root, data_root, overwrite)


def format_summary(report):
    plural = '' if report.attempted == 1 else 's'
    return (f"Extracted {report.extracted} / {report.attempted} color plate{plural} "
            f"in {report.elapsed * 1000.0:.3f} ms")
