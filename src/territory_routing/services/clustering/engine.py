"""K-means partition of the territory catalog."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Sequence

import numpy as np
from sklearn.cluster import KMeans

from ...config import settings
from ...data.catalog import CatalogProvider
from ...models.domain import TIME_SLOTS, RoutePoint, TerritoryCluster
from ..geospatial import project_to_plane


class ClusteringEngine:
    """Cluster territories spatially and cache the partition per catalog version.

    Centroids are seeded from ``cluster_count`` distinct catalog points chosen
    with a seeded generator, then refined by a fixed number of Lloyd
    iterations on a local plane projection. When the catalog holds fewer
    distinct locations than ``cluster_count`` the partition simply has fewer
    clusters.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        *,
        cluster_count: int = settings.cluster_count,
        iterations: int = settings.kmeans_iterations,
        random_state: int = settings.random_seed,
        working_days: Sequence[str] = settings.working_days,
    ) -> None:
        if cluster_count < 1:
            raise ValueError("cluster_count must be >= 1")
        if iterations < 1:
            raise ValueError("iterations must be >= 1")
        self.catalog = catalog
        self.cluster_count = cluster_count
        self.iterations = iterations
        self.random_state = random_state
        self.working_days = tuple(working_days) or ("MON",)
        self._lock = threading.Lock()
        self._cached_version: int | None = None
        self._clusters: tuple[TerritoryCluster, ...] = ()

    def clusters(self) -> tuple[TerritoryCluster, ...]:
        """Return the cached partition, recomputing it if the catalog changed."""
        with self._lock:
            version = self.catalog.version
            if self._cached_version != version:
                self._clusters = tuple(self.build_clusters(self.catalog.snapshot()))
                self._cached_version = version
                logging.info(f"Rebuilt {len(self._clusters)} territory clusters for catalog version {version}")
            return self._clusters

    def invalidate(self) -> None:
        with self._lock:
            self._cached_version = None

    def _initial_centroids(self, coordinates: np.ndarray, k: int) -> np.ndarray:
        rng = np.random.default_rng(self.random_state)
        distinct = np.unique(coordinates, axis=0)
        chosen = rng.choice(len(distinct), size=k, replace=False)
        return distinct[chosen]

    def build_clusters(self, points: Sequence[RoutePoint]) -> list[TerritoryCluster]:
        if not points:
            return []

        ref_lat = float(np.mean([point.latitude for point in points]))
        ref_lon = float(np.mean([point.longitude for point in points]))
        coordinates = np.array(
            [project_to_plane(point.latitude, point.longitude, ref_lat, ref_lon) for point in points]
        )

        distinct_count = len(np.unique(coordinates, axis=0))
        k = min(self.cluster_count, distinct_count)
        if k < self.cluster_count:
            logging.warning(
                f"Only {distinct_count} distinct territory locations; clustering into {k} groups instead of {self.cluster_count}"
            )

        kmeans = KMeans(
            n_clusters=k,
            init=self._initial_centroids(coordinates, k),
            n_init=1,
            max_iter=self.iterations,
            tol=0.0,
        )
        labels = kmeans.fit_predict(coordinates)

        clusters: list[TerritoryCluster] = []
        for label in range(k):
            members = [point for point, assigned in zip(points, labels) if assigned == label]
            if not members:
                continue
            clusters.append(self._describe_cluster(label, members))
        return clusters

    def _describe_cluster(self, label: int, members: Sequence[RoutePoint]) -> TerritoryCluster:
        slot_counts = Counter(point.optimal_time_slot for point in members)
        best_slot = max(TIME_SLOTS, key=lambda slot: slot_counts.get(slot, 0))
        return TerritoryCluster(
            cluster_id=f"cluster_{label + 1}",
            territories=tuple(point.territory for point in members),
            center_latitude=sum(point.latitude for point in members) / len(members),
            center_longitude=sum(point.longitude for point in members) / len(members),
            density=len(members),
            avg_success_rate=sum(point.success_probability for point in members) / len(members),
            optimal_day=self.working_days[label % len(self.working_days)],
            optimal_time_slot=best_slot,
        )
