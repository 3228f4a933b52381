"""
AWS Tag Sweeper Orchestrator - discovers resources across regions and applies
the desired tag set to each one, tolerating partial failures
"""
import functools
import logging
import time
from collections import Counter
from typing import Callable, List, Optional, Sequence, Tuple

from tabulate import tabulate

from .aggregation import Inventory, aggregate, merge_localities
from .config import TaggerConfig
from .context import RunContext
from .discovery import (
    GLOBAL_DISCOVERERS,
    REGIONAL_DISCOVERERS,
    Discoverer,
    RegionEnumerator,
    build_discoverers
)
from .exceptions import RegionEnumerationError
from .models import GLOBAL_LOCALITY, ResourceRecord, RunState, RunSummary, TaggingOutcome
from .tagging import ResourceTagger, RetryExecutor, TagMode, compute_target
from .utils.concurrency import TaskResult, batched, run_concurrently
from .utils.logging_config import log_execution_time

logger = logging.getLogger(__name__)

TagPlan = List[Tuple[ResourceRecord, dict]]


class TaggingOrchestrator:
    """Runs one discovery and tagging pass over an AWS account"""

    def __init__(self,
                 config: TaggerConfig,
                 context: Optional[RunContext] = None,
                 region_enumerator: Optional[RegionEnumerator] = None,
                 global_discoverers: Optional[Sequence[Discoverer]] = None,
                 regional_discoverers: Optional[Sequence[Discoverer]] = None,
                 tagger: Optional[ResourceTagger] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the orchestrator

        Args:
            config: Run configuration
            context: Shared session/client context; built from config when omitted
            region_enumerator: Source of the scan universe
            global_discoverers: Discoverers run once, in precedence order
            regional_discoverers: Discoverers run per region, in precedence order
                (bulk listing first)
            tagger: Applies tag sets by resource kind
            sleep: Wait function for rate limiting and backoff
        """
        self.config = config
        self.context = context or RunContext(config.home_region)
        self.region_enumerator = region_enumerator or RegionEnumerator(self.context)

        if global_discoverers is None:
            global_discoverers = build_discoverers(self.context, GLOBAL_DISCOVERERS)
        if regional_discoverers is None:
            regional_discoverers = build_discoverers(self.context, REGIONAL_DISCOVERERS)
        self.global_discoverers = list(global_discoverers)
        self.regional_discoverers = list(regional_discoverers)

        self.tagger = tagger or ResourceTagger(self.context)
        self.retry_executor = RetryExecutor(
            max_attempts=config.max_attempts,
            base_delay=config.base_delay,
            sleep=sleep
        )
        self.sleep = sleep

        self.state = RunState.INIT
        self.skipped_count = 0

    def run(self) -> RunSummary:
        """
        Execute the full pipeline

        Returns:
            Run summary

        Raises:
            RegionEnumerationError: the region list could not be obtained
            Exception: any unhandled error; the run is left in the ABORTED state
        """
        start_time = time.time()
        self.skipped_count = 0
        logger.info("Starting AWS resource tagging run...")
        logger.info(f"Using home region: {self.context.home_region}")

        try:
            regions = self._enumerate_regions()

            self._transition(RunState.DISCOVERING_GLOBAL)
            inventories = [self._discover_global()]

            self._transition(RunState.DISCOVERING_REGIONS)
            inventories.extend(self._discover_regions(regions))

            self._transition(RunState.AGGREGATING)
            inventory = merge_localities(inventories)
            logger.info(f"Total resources discovered: {len(inventory)}")

            self._transition(RunState.APPLYING_POLICY)
            plan = self._apply_policy(inventory)

            self._transition(RunState.TAGGING)
            outcomes = self._tag_resources(plan)

            self._transition(RunState.SUMMARIZING)
            summary = self._summarize(outcomes, len(inventory), time.time() - start_time)

            self._transition(RunState.DONE)
            return summary

        except RegionEnumerationError as e:
            self._transition(RunState.ABORTED)
            logger.critical(f"Cannot determine regions to scan, aborting: {e}")
            raise
        except Exception as e:
            self._transition(RunState.ABORTED)
            logger.critical(f"Critical error in tagging process: {e}", exc_info=True)
            raise

    def _transition(self, state: RunState):
        logger.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state

    def _enumerate_regions(self) -> List[str]:
        self._transition(RunState.ENUMERATING_REGIONS)
        regions = self.region_enumerator.list_regions()

        if self.config.regions:
            requested = list(dict.fromkeys(self.config.regions))
            unknown = [r for r in requested if r not in regions]
            if unknown:
                logger.warning(f"Ignoring regions not enabled for this account: {', '.join(unknown)}")
            regions = [r for r in regions if r in requested]

        logger.info(f"Found {len(regions)} regions: {', '.join(regions)}")
        return regions

    def _collect_layers(self, locality: str, results: Sequence[TaskResult]) -> List[List[ResourceRecord]]:
        """Turn task results into aggregation layers; failed discoverers contribute nothing"""
        layers = []
        for result in results:
            if result.ok:
                layers.append(result.value)
            else:
                logger.error(f"Error fetching resources in {locality}: {result.error}")
                layers.append([])
        return layers

    def _log_locality(self, locality: str, inventory: Inventory, discoverers: Sequence[Discoverer],
                      layers: Sequence[Sequence[ResourceRecord]]):
        breakdown = ', '.join(
            f"{discoverer.name}: {len(layer)}"
            for discoverer, layer in zip(discoverers, layers)
        )
        logger.info(f"  Found {len(inventory)} unique resources in {locality} ({breakdown})")

    @log_execution_time
    def _discover_global(self) -> Inventory:
        """Run the global discoverers once, concurrently"""
        logger.info("Fetching global resources (IAM, S3)...")

        results = run_concurrently(
            self.global_discoverers,
            lambda discoverer: discoverer.discover(GLOBAL_LOCALITY)
        )
        layers = self._collect_layers(GLOBAL_LOCALITY, results)
        inventory = aggregate(layers)

        self._log_locality(GLOBAL_LOCALITY, inventory, self.global_discoverers, layers)
        return inventory

    @log_execution_time
    def _discover_regions(self, regions: Sequence[str]) -> List[Inventory]:
        """
        Run the regional discoverers in region batches

        Every (region, discoverer) pair of a batch runs concurrently; batches
        run one after another. Results come back in submission order, so each
        region's layers follow discoverer precedence.
        """
        inventories = []
        discoverer_count = len(self.regional_discoverers)
        if not discoverer_count:
            return [{} for _ in regions]

        for batch in batched(list(regions), self.config.region_batch_size):
            for region in batch:
                logger.info(f"Processing region: {region}")

            tasks = [(region, discoverer) for region in batch for discoverer in self.regional_discoverers]
            results = run_concurrently(tasks, lambda task: task[1].discover(task[0]))

            for offset, region in enumerate(batch):
                region_results = results[offset * discoverer_count:(offset + 1) * discoverer_count]
                layers = self._collect_layers(region, region_results)
                inventory = aggregate(layers)
                self._log_locality(region, inventory, self.regional_discoverers, layers)
                inventories.append(inventory)

        return inventories

    def _apply_policy(self, inventory: Inventory) -> TagPlan:
        """Compute target tags; resources needing no action are counted as skipped"""
        desired = self.config.desired_tags
        mode = self.config.mode
        plan = []

        for record in inventory.values():
            target = compute_target(record.tags, desired, mode)
            if target is None:
                self.skipped_count += 1
                continue
            plan.append((record, target))

        if mode is TagMode.SELECTIVE:
            logger.info(f"Resources missing tags: {len(plan)} out of {len(inventory)}")
        else:
            logger.info(f"Tagging all {len(plan)} discovered resources (mode = {mode.value})")

        if plan:
            by_type = Counter(record.label for record, _ in plan)
            table = tabulate(sorted(by_type.items()), headers=['Resource type', 'Count'])
            logger.info(f"Resources to tag by type:\n{table}")
        else:
            logger.info("All resources are already properly tagged!")

        return plan

    def _tag_resources(self, plan: TagPlan) -> List[TaggingOutcome]:
        """Tag resources one at a time, pausing between calls to avoid throttling"""
        outcomes = []
        total = len(plan)

        for index, (record, target) in enumerate(plan, start=1):
            logger.info(f"[{index}/{total}] Tagging {record.label}: {record.display_name}")

            if self.config.dry_run:
                logger.info(f"[DRY RUN] Would tag {record.identity} with {target}")
                self.skipped_count += 1
                outcomes.append(TaggingOutcome(
                    identity=record.identity,
                    kind=record.kind,
                    attempted=False,
                    succeeded=False
                ))
                continue

            result = self.retry_executor.attempt(
                functools.partial(self.tagger.apply_tags, record, target),
                description=record.identity
            )
            outcomes.append(TaggingOutcome(
                identity=record.identity,
                kind=record.kind,
                attempted=True,
                succeeded=result.succeeded,
                attempt_count=result.attempt_count,
                last_error=str(result.last_error) if result.last_error else None
            ))

            if index < total:
                self.sleep(self.config.inter_operation_delay)

        return outcomes

    def _summarize(self, outcomes: List[TaggingOutcome], discovered_count: int,
                   elapsed_seconds: float) -> RunSummary:
        succeeded = [o for o in outcomes if o.succeeded]
        failed = [o for o in outcomes if o.attempted and not o.succeeded]

        summary = RunSummary(
            success_count=len(succeeded),
            failure_count=len(failed),
            skipped_count=self.skipped_count,
            discovered_count=discovered_count,
            elapsed_seconds=elapsed_seconds,
            failed_identities=[o.identity for o in failed],
            outcomes=outcomes
        )

        logger.info("=" * 60)
        logger.info("TAGGING SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Successfully tagged: {summary.success_count} resources")
        logger.info(f"Failed to tag:       {summary.failure_count} resources")
        logger.info(f"Skipped:             {summary.skipped_count} resources")
        logger.info(f"Total execution time: {summary.elapsed_seconds:.2f} seconds")

        if summary.failed_identities:
            logger.info("Failed resources:")
            for identity in summary.failed_identities:
                logger.info(f"  - {identity}")

        logger.info("Tagging process completed!")
        return summary
