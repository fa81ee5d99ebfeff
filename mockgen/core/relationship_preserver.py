import random
import logging
from typing import Any, Dict, List, Optional


def topological_sort(dependencies: Dict[str, List[str]], logger=None) -> List[str]:
    """
    Order tables so every table comes after the tables it depends on.

    Depth-first from each table in mapping order, dependencies in declaration
    order. An edge back to a table still in progress is a cycle; it is skipped
    and the table is emitted once its other dependencies are done.
    """
    logger = logger or logging.getLogger(__name__)
    done = set()
    visiting = set()
    order = []

    for start in dependencies:
        if start in done:
            continue

        visiting.add(start)
        stack = [(start, iter(dependencies.get(start, [])))]
        while stack:
            node, pending = stack[-1]
            for dep in pending:
                if dep in visiting:
                    logger.warning(f"Circular dependency {node} -> {dep} skipped")
                    continue
                if dep in done:
                    continue
                visiting.add(dep)
                stack.append((dep, iter(dependencies.get(dep, []))))
                break
            else:
                stack.pop()
                visiting.discard(node)
                done.add(node)
                order.append(node)

    return order


class RelationshipPreserver:
    """
    Handles foreign key relationships and referential integrity
    for synthetic data generation.
    """

    def __init__(self, logger=None, rng: Optional[random.Random] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.random = rng or random.Random()

        # table -> records generated so far in this run
        self._fk_pools: Dict[str, List[Dict[str, Any]]] = {}

    def get_generation_order(self, dependencies: Dict[str, List[str]]) -> List[str]:
        """Topological order over the table -> dependency-list map"""
        generation_order = topological_sort(dependencies, logger=self.logger)
        self.logger.info(f"Generation order determined: {generation_order}")
        return generation_order

    @property
    def pool(self) -> Dict[str, List[Dict[str, Any]]]:
        return self._fk_pools

    def add_records(self, table_name: str, records: List[Dict[str, Any]]):
        """Make a parent table's records available to its dependents"""
        self._fk_pools[table_name] = records
        self.logger.debug(f"FK pool for {table_name} now holds {len(records)} records")

    def get_fk_values(self, parent_table: str, parent_column: Optional[str],
                      pool: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> List[Any]:
        """Non-null values of ``parent_column`` among the pooled parent records"""
        pool = self._fk_pools if pool is None else pool
        if not parent_column:
            return []
        records = pool.get(parent_table) or []
        return [record[parent_column] for record in records if record.get(parent_column) is not None]

    def choose_fk_value(self, column, pool: Optional[Dict[str, List[Dict[str, Any]]]] = None,
                        rng: Optional[random.Random] = None):
        """
        Pick a referenced value for an FK column uniformly from the pool.
        Returns (found, value); found is False when the pool has nothing usable.
        """
        values = self.get_fk_values(column.foreign_table, column.foreign_column, pool)
        if not values:
            return False, None
        return True, (rng or self.random).choice(values)

    def get_fk_pools_status(self) -> Dict[str, Any]:
        """
        Get status information about current FK pools.
        """
        status = {
            'total_pools': len(self._fk_pools),
            'pools': {}
        }

        for table_name, records in self._fk_pools.items():
            status['pools'][table_name] = {
                'available_records': len(records),
                'sample_records': records[:3]
            }

        return status

    def clear_fk_pools(self, table_name: str = None):
        """
        Clear FK pools for a specific table or all tables.
        """
        if table_name:
            self._fk_pools.pop(table_name, None)
            self.logger.info(f"Cleared FK pool for table: {table_name}")
        else:
            self._fk_pools.clear()
            self.logger.info("Cleared all FK pools")
